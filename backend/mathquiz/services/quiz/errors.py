class QuizError(Exception):
    pass


class ValidationError(QuizError):
    """A submitted answer could not be read as an integer."""

    def __init__(self, raw_answer):
        super().__init__(f"not an integer answer: {raw_answer!r}")
        self.raw_answer = raw_answer
