"""Architect - turns a chat request into a GenerationResult via an LLM."""

from langchain_core.language_models import BaseLanguageModel
from pydantic import ValidationError as PydanticValidationError

from neural_os.apps.models import App
from neural_os.blueprint import GenerationResult, ResponseParser
from neural_os.core import get_logger, safe_json_dumps, ValidationError
from neural_os.core.validate import BuildRequest
from .prompt import get_build_prompt

logger = get_logger(__name__)


class Architect:
    """
    Builds or updates micro-apps from natural language.

    The model call is the only slow, fallible step; every failure is turned
    into a message-only result so the chat can explain what went wrong.
    """

    def __init__(self, llm: BaseLanguageModel | None = None, parser: ResponseParser | None = None) -> None:
        self.llm = llm
        self.parser = parser or ResponseParser()
        logger.info("initialized", mode="llm" if llm is not None else "offline")

    def build_prompt(self, request: str, app: App | None = None) -> str:
        """Prompt for a request, with the current app as context when editing."""
        context = ""
        if app is not None:
            context = safe_json_dumps(
                {
                    "tool_name": app.title,
                    "archetype": app.archetype.value if app.archetype else None,
                    "initial_state": app.data,
                    "blueprint": app.blueprint,
                },
                indent=2,
            )
        return get_build_prompt(request, context)

    def build(self, message: str, app: App | None = None) -> GenerationResult:
        """
        Ask the model for a new app, or an update to ``app``.

        Args:
            message: User's request
            app: App being edited (optional)

        Returns:
            GenerationResult; on failure a message-only result explaining it
        """
        try:
            request = BuildRequest(message=message, app_id=app.id if app else None)
        except PydanticValidationError as e:
            logger.warning("request_invalid", error=str(e))
            return GenerationResult(message="Please describe the app you want to build.")

        if self.llm is None:
            return GenerationResult(message="No model is configured. Pass a language model to the architect.")

        prompt = self.build_prompt(request.message, app)
        logger.info("llm_generate", app_id=request.app_id, prompt_length=len(prompt))

        try:
            response = self.llm.invoke(prompt)
        except Exception as e:
            logger.error("llm_failed", error=str(e))
            return GenerationResult(message=f"Error: {e}")

        content = response.content if hasattr(response, "content") else str(response)
        if not isinstance(content, str):
            content = str(content)

        try:
            result = self.parser.parse(content)
        except ValidationError as e:
            logger.error("llm_parse_failed", error=str(e), content_preview=content[:500])
            return GenerationResult(message=f"Could not understand the model response: {e}")

        if result.is_app and not result.message:
            result = result.model_copy(update={"message": f"Created {result.tool_name}."})

        logger.info("llm_parse_success", is_app=result.is_app, blocks=len(result.blueprint))
        return result
