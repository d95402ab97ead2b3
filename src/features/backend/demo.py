"""In-memory data source for demo deployments."""

import uuid
from collections import OrderedDict
from datetime import datetime

from src.core.api_client import APIError

from .datasource import DataSource
from .models import (
    ChatAnswer,
    Chatbot,
    ChatSource,
    DailyUsage,
    KnowledgeSource,
    ProcessingStatus,
    SearchResult,
    SourceType,
    StatsSnapshot,
    TopQuestion,
    WidgetConfig,
)

DEMO_GREETING = "Hello! I'm a demo chatbot. How can I help you today?"
DEMO_SYSTEM_PROMPT = "You are a helpful assistant for our customers."
DEMO_ANSWER = (
    "This is a demo response. Connect the console to a backend to get "
    "answers grounded in your knowledge sources."
)


def _demo_stats() -> StatsSnapshot:
    return StatsSnapshot(
        total_conversations=1248,
        total_messages=8963,
        avg_response_time=1.2,
        daily_usage=[
            DailyUsage(date="Mon", count=120),
            DailyUsage(date="Tue", count=145),
            DailyUsage(date="Wed", count=132),
            DailyUsage(date="Thu", count=187),
            DailyUsage(date="Fri", count=166),
            DailyUsage(date="Sat", count=91),
            DailyUsage(date="Sun", count=78),
        ],
        top_questions=[
            TopQuestion(question="How do I reset my password?", count=45),
            TopQuestion(question="What are your business hours?", count=38),
            TopQuestion(question="Do you offer refunds?", count=32),
            TopQuestion(question="How can I contact support?", count=29),
            TopQuestion(question="What payment methods do you accept?", count=25),
        ],
    )


def _demo_sources(chatbot_id: str) -> list[KnowledgeSource]:
    return [
        KnowledgeSource(
            id="mock-1",
            chatbot_id=chatbot_id,
            type=SourceType.DOCUMENT,
            name="FAQ Document",
            processing_status=ProcessingStatus.COMPLETED,
            processing_start_time="2023-10-01T14:30:00Z",
            processing_end_time="2023-10-01T14:35:00Z",
        ),
        KnowledgeSource(
            id="mock-2",
            chatbot_id=chatbot_id,
            type=SourceType.WEBSITE,
            name="Company Website",
            processing_status=ProcessingStatus.COMPLETED,
            processing_start_time="2023-10-02T10:15:00Z",
            processing_end_time="2023-10-02T10:25:00Z",
        ),
    ]


class DemoChatbot:
    """Seeded state for one demo chatbot."""

    def __init__(self, chatbot_id: str):
        self.chatbot = Chatbot(id=chatbot_id, name="Demo Chatbot", status="active")
        self.widget_config = WidgetConfig(name="Demo Chatbot", greeting=DEMO_GREETING)
        self.system_prompt = DEMO_SYSTEM_PROMPT
        self.sources = _demo_sources(chatbot_id)
        self.stats = _demo_stats()


class DemoStore:
    """
    Demo chatbots shared by every session of the process.

    At most ``max_chatbots`` are kept. The least recently used one is dropped
    and is seeded again the next time it is asked for.
    """

    def __init__(self, max_chatbots: int = 100):
        self.max_chatbots = max_chatbots
        self._chatbots: OrderedDict[str, DemoChatbot] = OrderedDict()

    def __len__(self) -> int:
        return len(self._chatbots)

    def get(self, chatbot_id: str) -> DemoChatbot:
        chatbot = self._chatbots.get(chatbot_id)
        if chatbot is None:
            chatbot = DemoChatbot(chatbot_id)
            self._chatbots[chatbot_id] = chatbot
            while len(self._chatbots) > self.max_chatbots:
                self._chatbots.popitem(last=False)
        else:
            self._chatbots.move_to_end(chatbot_id)
        return chatbot


class DemoBackend(DataSource):
    """Serves and mutates placeholder data without any network calls."""

    def __init__(self, store: DemoStore, chatbot_id: str):
        super().__init__(chatbot_id)
        self.state = store.get(chatbot_id)

    def _find(self, source_id: str) -> KnowledgeSource:
        for source in self.state.sources:
            if str(source.id) == source_id:
                return source
        raise APIError("Knowledge source not found", status_code=404)

    async def get_chatbot(self) -> Chatbot:
        return self.state.chatbot.model_copy(
            update={
                "system_prompt": self.state.system_prompt,
                "widget_config": self.state.widget_config,
            }
        )

    async def get_widget_config(self) -> WidgetConfig:
        return self.state.widget_config.model_copy()

    async def update_widget_config(self, config: WidgetConfig) -> WidgetConfig:
        self.state.widget_config = config.model_copy()
        return config

    async def get_system_prompt(self) -> str:
        return self.state.system_prompt

    async def update_system_prompt(self, prompt: str) -> str:
        self.state.system_prompt = prompt
        return prompt

    async def list_sources(self) -> list[KnowledgeSource]:
        return list(self.state.sources)

    async def get_source(self, source_id: str) -> KnowledgeSource:
        return self._find(source_id)

    async def create_document_source(self, name: str, content: str) -> KnowledgeSource:
        source = KnowledgeSource(
            id=f"demo-{uuid.uuid4().hex[:8]}",
            chatbot_id=self.chatbot_id,
            type=SourceType.DOCUMENT,
            name=name,
            content=content,
            processing_status=ProcessingStatus.PENDING,
            processing_start_time=datetime.utcnow().isoformat() + "Z",
        )
        self.state.sources.append(source)
        return source

    async def create_website_source(
        self, url: str, max_pages: int = 10, max_depth: int = 2
    ) -> KnowledgeSource:
        source = KnowledgeSource(
            id=f"demo-{uuid.uuid4().hex[:8]}",
            chatbot_id=self.chatbot_id,
            type=SourceType.WEBSITE,
            name=url,
            processing_status=ProcessingStatus.PENDING,
            processing_start_time=datetime.utcnow().isoformat() + "Z",
            processing_message=f"Crawling up to {max_pages} pages",
        )
        self.state.sources.append(source)
        return source

    async def delete_source(self, source_id: str) -> None:
        source = self._find(source_id)
        self.state.sources.remove(source)

    async def search(self, query: str, top_k: int = 5) -> list[SearchResult]:
        terms = {term for term in query.lower().split() if len(term) > 2}
        results = []
        for source in self.state.sources:
            text = f"{source.name} {source.content or ''}".lower()
            hits = sum(1 for term in terms if term in text)
            if hits:
                results.append(
                    SearchResult(
                        chunk_id=f"{source.id}-0",
                        content=source.content or source.name,
                        similarity=round(hits / len(terms), 2),
                        metadata={
                            "source": source.name,
                            "source_type": source.type.value,
                            "title": source.name,
                        },
                    )
                )
        results.sort(key=lambda r: r.similarity, reverse=True)
        return results[:top_k]

    async def test_chat(self, query: str) -> ChatAnswer:
        completed = [
            s for s in self.state.sources
            if s.processing_status == ProcessingStatus.COMPLETED
        ]
        return ChatAnswer(
            answer=DEMO_ANSWER,
            sources=[
                ChatSource(
                    chunk_id=f"{s.id}-0",
                    content=s.content or f"Excerpt from {s.name}",
                    source=s.name,
                    title=s.name,
                )
                for s in completed[:3]
            ],
        )

    async def get_stats(self) -> StatsSnapshot:
        return self.state.stats.model_copy()
