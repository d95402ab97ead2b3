"""Widget embed code generator."""

import json

from src.features.backend.models import WidgetPosition


def generate_embed_code(
    chatbot_id: str,
    script_url: str,
    config_var: str = "vocataConfig",
    position: WidgetPosition | str = WidgetPosition.RIGHT,
) -> str:
    """
    Build the snippet customers paste before ``</body>`` on their site.

    The widget script reads its settings from ``window.<config_var>``.

    Raises:
        ValueError: If position is not "left" or "right"
    """
    position = WidgetPosition(position)

    return f'''<script>
  window.{config_var} = {{
    chatbotId: {json.dumps(chatbot_id)},
    position: "{position.value}", // or "{_other(position).value}"
  }};
</script>
<script src={json.dumps(script_url)} async></script>'''


def _other(position: WidgetPosition) -> WidgetPosition:
    if position == WidgetPosition.RIGHT:
        return WidgetPosition.LEFT
    return WidgetPosition.RIGHT
