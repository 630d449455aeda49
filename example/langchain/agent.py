"""A minimal tool-calling coach with workout memory.

    pip install fitmemory[openai,examples]
    OPENAI_API_KEY=... python example/langchain/agent.py
"""

import asyncio
import os

from langchain_core.messages import HumanMessage, SystemMessage, ToolMessage
from langchain_openai import ChatOpenAI

from fitmemory import RECALL_INSTRUCTIONS, MemoryEngine, OpenAITextGenerator, SQLMemoryLog
from fitmemory.adapters.langchain import LangChainRecall, build_langchain_tools

USER_ID = "demo_user"

log = SQLMemoryLog(os.environ.get("DATABASE_URL", "sqlite:///fitmemory.db"))
engine = MemoryEngine(log=log, generator=OpenAITextGenerator())
memory = LangChainRecall(engine, USER_ID)
tools = {t.name: t for t in build_langchain_tools(engine, USER_ID)}

llm = ChatOpenAI(model="gpt-4o-mini").bind_tools(list(tools.values()))


async def chat(text: str) -> str:
    # Every human turn is offered to memory; small talk is dropped.
    memory.add_message(HumanMessage(content=text))

    messages = [
        SystemMessage(content="You are a friendly fitness coach.\n\n" + RECALL_INSTRUCTIONS),
        HumanMessage(content=text),
    ]
    while True:
        reply = await llm.ainvoke(messages)
        messages.append(reply)
        if not reply.tool_calls:
            return reply.content
        for call in reply.tool_calls:
            output = await tools[call["name"]].ainvoke(call["args"])
            messages.append(ToolMessage(content=output, tool_call_id=call["id"]))


async def main():
    log.init()
    try:
        for text in (
            "Crushed leg day today: squats 5x5 at 100kg and walking lunges.",
            "What did I train this week?",
        ):
            print(f"> {text}")
            print(await chat(text), "\n")
    finally:
        log.close()


if __name__ == "__main__":
    asyncio.run(main())
