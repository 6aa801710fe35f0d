# chat_analyzer/domain/exceptions.py


class ChatAnalysisError(ValueError):
    """Base class for input problems the caller should report back to the user."""


class EmptyChatError(ChatAnalysisError):
    """No input was provided, or the provided export is blank."""

    def __init__(self, message: str = "No file uploaded"):
        super().__init__(message)


class NoValidMessagesError(ChatAnalysisError):
    """The input was read but not a single message header was recognized."""

    def __init__(
            self,
            total_lines: int = 0,
            message: str = "No valid messages found. Please upload an exported WhatsApp chat .txt file."
    ):
        super().__init__(message)
        self.total_lines = total_lines
