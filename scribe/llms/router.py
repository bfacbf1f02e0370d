from scribe.llms.base import LLMBackend

GEMINI_PREFIX = "gemini"


class ModelRouter:
    """Pick the backend that serves a model id.

    Ids starting with "gemini" go to the Gemini-compatible endpoint, everything
    else goes to the general-purpose one.
    """

    def __init__(self, *, gemini: LLMBackend, default: LLMBackend) -> None:
        self.gemini = gemini
        self.default = default

    def backend_for(self, model: str) -> LLMBackend:
        if model.startswith(GEMINI_PREFIX):
            return self.gemini
        return self.default
