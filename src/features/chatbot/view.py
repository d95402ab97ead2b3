"""Chatbot configuration view."""

from typing import Any

from src.core.resource import Resource
from src.features.backend.datasource import DataSource
from src.features.backend.models import Chatbot, WidgetConfig, WidgetPosition
from src.features.dashboard.views import ConsoleView

from .embed import generate_embed_code
from .models import ChatbotViewState


class ChatbotConfigView(ConsoleView):
    """System prompt, widget configuration and embed snippet of the chatbot."""

    name = "chatbot"
    state_class = ChatbotViewState

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.chatbot: Resource[Chatbot] | None = None
        self.widget_config: Resource[WidgetConfig] | None = None
        self.system_prompt: Resource[str] | None = None

    def create_resources(self, source: DataSource) -> None:
        self.chatbot = self.resource(source.get_chatbot)
        self.widget_config = self.resource(source.get_widget_config)
        self.system_prompt = self.resource(source.get_system_prompt)

    def resources(self) -> list[Resource]:
        if self.chatbot is None:
            return []
        return [self.chatbot, self.widget_config, self.system_prompt]

    async def save_system_prompt(self, prompt: str) -> bool:
        def apply(saved: str) -> None:
            self.system_prompt.data = saved
            if self.chatbot.data is not None:
                self.chatbot.data = self.chatbot.data.model_copy(
                    update={"system_prompt": saved}
                )

        return await self.mutate(
            "saving_system_prompt",
            lambda source: source.update_system_prompt(prompt),
            apply,
            "System prompt saved",
        )

    async def save_widget_config(self, config: WidgetConfig) -> bool:
        def apply(saved: WidgetConfig) -> None:
            self.widget_config.data = saved
            if self.chatbot.data is not None:
                self.chatbot.data = self.chatbot.data.model_copy(
                    update={"widget_config": saved}
                )

        return await self.mutate(
            "saving_widget_config",
            lambda source: source.update_widget_config(config),
            apply,
            "Widget configuration saved",
        )

    def embed_code(self, position: WidgetPosition | None = None) -> str | None:
        """Embed snippet for this chatbot, or None before a chatbot is resolved."""
        if self.chatbot_id is None:
            return None
        if position is None:
            config = self.widget_config.data if self.widget_config else None
            position = config.position if config else WidgetPosition.RIGHT
        return generate_embed_code(
            self.chatbot_id,
            script_url=self.settings.widget_script_url,
            config_var=self.settings.widget_config_var,
            position=position,
        )

    def view_state(self) -> dict[str, Any]:
        return {
            "chatbot": self.chatbot.data if self.chatbot else None,
            "widget_config": self.widget_config.data if self.widget_config else None,
            "system_prompt": self.system_prompt.data if self.system_prompt else None,
        }
