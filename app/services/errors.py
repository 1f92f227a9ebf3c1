from __future__ import annotations

from app.features.topic_gate import TopicDecision


class CareerServiceError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(CareerServiceError):
    status_code = 400


class TopicRejectedError(CareerServiceError):
    status_code = 400

    def __init__(self, decision: TopicDecision):
        super().__init__(decision.message or "Message rejected.")
        self.decision = decision


class UserNotFoundError(CareerServiceError):
    status_code = 404

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class PlanLimitError(CareerServiceError):
    status_code = 403


class ProOnlyError(CareerServiceError):
    status_code = 403
