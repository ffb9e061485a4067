from datetime import datetime, timedelta, timezone
from typing import Optional, Any, Dict
from jose import JWTError, jwt
from app.core.settings import settings

def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.jwt_algorithm)

def decode_access_token(token: str) -> Optional[str]:
    """
    토큰을 검증하고 사용자 식별자를 반환. 유효하지 않으면 None.
    식별자는 sub 클레임, 없으면 id 클레임을 사용.
    """
    try:
        # sub가 숫자인 토큰도 허용 (문자열로 변환)
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"verify_sub": False},
        )
    except JWTError:
        return None
    user_id = payload.get("sub") or payload.get("id")
    if user_id is None or str(user_id).strip() == "":
        return None
    return str(user_id)
