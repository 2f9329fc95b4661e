from typing import Protocol, runtime_checkable


@runtime_checkable
class Renderable(Protocol):
    def render(self, context) -> str:
        ...


@runtime_checkable
class SubmissionParticipant(Protocol):
    def validate_submission(self, context, submission) -> list:
        ...

    def handle_submission(self, session, submission) -> None:
        ...
