from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.core.config import settings
from app.core.security import decode_jwt

bearer = HTTPBearer(auto_error=False)

def get_current_admin(creds: HTTPAuthorizationCredentials = Depends(bearer)) -> dict:
    if not creds:
        raise HTTPException(status_code=401, detail="Missing authorization token")
    try:
        return decode_jwt(creds.credentials, settings.ADMIN_JWT_SECRET)
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid token")

def require_role(*roles: str):
    def _inner(admin: dict = Depends(get_current_admin)) -> dict:
        role = str(admin.get("role") or "").upper()
        if role not in roles:
            raise HTTPException(status_code=403, detail="Insufficient permissions")
        return admin
    return _inner
