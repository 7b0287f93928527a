from typing import Optional, Union

from context_service.app.services.identity_provider import SessionIdentity

BoardId = Union[int, str]


def board_ref(board_id: Optional[BoardId], session: SessionIdentity) -> Optional[str]:
    """Board id from the request, else the one carried by the session token"""
    if board_id is not None and str(board_id).strip():
        return str(board_id).strip()
    return session.board_id
