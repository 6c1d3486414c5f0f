import logging
from typing import Callable

from fastapi import Depends, HTTPException, Request, status

from nonceguard.application.nonce_engine import NonceEngine
from nonceguard.domain.errors import StoreUnavailable
from nonceguard.presentation.dependencies import get_nonce_engine
from nonceguard.settings import get_settings

logger = logging.getLogger(__name__)


def require_nonce(action: str, *, header_name: str | None = None) -> Callable:
    """
    Build a dependency that consumes the nonce sent for `action`.

    Usage:
        @router.post("/signup", dependencies=[Depends(require_nonce("signup-form"))])
        async def signup(...): ...

    Missing or invalid nonce -> 403; store backend down -> 503.
    """

    async def _verify(
        request: Request, engine: NonceEngine = Depends(get_nonce_engine)
    ) -> None:
        name = header_name or get_settings().nonce_header_name
        token = request.headers.get(name)
        if not token:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="invalid nonce"
            )
        try:
            ok = await engine.verify(token, action)
        except StoreUnavailable:
            logger.exception("nonce store unavailable", extra={"action": action})
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="nonce store unavailable",
            )
        if not ok:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN, detail="invalid nonce"
            )

    return _verify
