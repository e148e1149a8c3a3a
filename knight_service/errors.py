# knight_service/errors.py


class KnightServiceError(Exception):
    """Base class for business-rule failures raised by the service."""


class KnightNotFoundError(KnightServiceError):
    def __init__(self, knight_id: str):
        super().__init__(f"Knight {knight_id!r} not found")
        self.knight_id = knight_id


class NicknameInUseError(KnightServiceError):
    def __init__(self, nickname: str):
        super().__init__(f"Nickname {nickname!r} already belongs to a knight")
        self.nickname = nickname
