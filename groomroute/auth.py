import base64
import json
import logging
import time
from typing import Optional

import httpx
from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import padding
from cryptography.x509 import load_pem_x509_certificate
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import DEFAULT_TIMEZONE, FIREBASE_PROJECT_ID
from .database import get_db
from .models import Account, Groomer, User

logger = logging.getLogger(__name__)

security = HTTPBearer()

GOOGLE_CERTS_URL = (
    "https://www.googleapis.com/robot/v1/metadata/x509/securetoken@system.gserviceaccount.com"
)

# Cache for Google's public keys
_cached_keys: Optional[dict] = None


async def get_google_public_keys(force_refresh: bool = False) -> Optional[dict]:
    """Fetch Google's public keys for Firebase token verification"""
    global _cached_keys
    if _cached_keys and not force_refresh:
        return _cached_keys

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(GOOGLE_CERTS_URL, timeout=10.0)
        if response.status_code == 200:
            _cached_keys = response.json()
            logger.info(f"✅ Fetched {len(_cached_keys)} Google public keys")
            return _cached_keys
        logger.error(f"❌ Failed to fetch Google public keys: HTTP {response.status_code}")
    except httpx.HTTPError as e:
        logger.error(f"❌ Error fetching Google public keys: {str(e)}")
    return None


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _check_claims(payload: dict) -> None:
    if payload.get("aud") != FIREBASE_PROJECT_ID:
        logger.error("❌ Token audience mismatch")
        raise HTTPException(status_code=401, detail="Invalid token audience")

    if payload.get("iss") != f"https://securetoken.google.com/{FIREBASE_PROJECT_ID}":
        logger.error("❌ Token issuer mismatch")
        raise HTTPException(status_code=401, detail="Invalid token issuer")

    now = time.time()
    if payload.get("exp", 0) < now:
        raise HTTPException(
            status_code=401,
            detail="Token has expired. Please refresh your session.",
            headers={"X-Token-Expired": "true"},
        )

    # Allow 60 seconds clock skew
    if payload.get("iat", 0) > now + 60:
        logger.warning("⚠️ Token issued in the future")
        raise HTTPException(status_code=401, detail="Invalid token")

    if "auth_time" not in payload:
        raise HTTPException(status_code=401, detail="Invalid token claims")


async def verify_firebase_token(token: str) -> dict:
    """
    Verify a Firebase ID token: RS256 signature against Google's certificates,
    then audience, issuer and expiry claims.
    """
    if not FIREBASE_PROJECT_ID:
        logger.error("❌ FIREBASE_PROJECT_ID not configured")
        raise HTTPException(status_code=500, detail="Firebase not configured")

    parts = token.split(".")
    if len(parts) != 3:
        raise HTTPException(status_code=401, detail="Invalid token format")
    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(_b64url_decode(header_b64))
        payload = json.loads(_b64url_decode(payload_b64))
        signature = _b64url_decode(signature_b64)
    except (ValueError, TypeError) as e:
        logger.error(f"❌ Failed to decode token: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token encoding") from e

    if header.get("alg") != "RS256":
        raise HTTPException(status_code=401, detail="Invalid token algorithm")

    kid = header.get("kid")
    if not kid:
        raise HTTPException(status_code=401, detail="Token missing key ID")

    public_keys = await get_google_public_keys()
    if not public_keys or kid not in public_keys:
        logger.warning(f"⚠️ Key ID {kid} not found in public keys, refreshing")
        public_keys = await get_google_public_keys(force_refresh=True)
        if not public_keys or kid not in public_keys:
            raise HTTPException(status_code=401, detail="Unable to verify token signature")

    cert = load_pem_x509_certificate(public_keys[kid].encode())
    try:
        cert.public_key().verify(
            signature,
            f"{header_b64}.{payload_b64}".encode(),
            padding.PKCS1v15(),
            hashes.SHA256(),
        )
    except InvalidSignature as e:
        logger.error(f"❌ Token signature verification failed: {str(e)}")
        raise HTTPException(status_code=401, detail="Invalid token signature") from e

    _check_claims(payload)
    return payload


def provision_user(db: Session, firebase_uid: str, email: str, name: str) -> User:
    """First sign-in: create the business account, its owner login and owner groomer"""
    display_name = name or (email.split("@")[0] if email else "My Business")
    account = Account(name=display_name, timezone=DEFAULT_TIMEZONE)
    db.add(account)
    db.flush()

    groomer = Groomer(account_id=account.id, name=display_name, email=email or None)
    db.add(groomer)
    db.flush()

    user = User(
        firebase_uid=firebase_uid,
        email=email or None,
        full_name=name,
        account_id=account.id,
        groomer_id=groomer.id,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"🆕 Provisioned account {account.id} for {email or firebase_uid}")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Get current user from Firebase token"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
        )

    decoded_token = await verify_firebase_token(credentials.credentials)

    # Firebase ID tokens use 'sub' as the user ID claim
    firebase_uid = decoded_token.get("sub") or decoded_token.get("user_id")
    if not firebase_uid:
        logger.error(f"❌ Token missing user ID claim. Claims: {list(decoded_token.keys())}")
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = db.query(User).filter(User.firebase_uid == firebase_uid).first()
    if user:
        return user

    email = decoded_token.get("email") or ""
    try:
        return provision_user(db, firebase_uid, email, decoded_token.get("name", ""))
    except Exception as e:
        db.rollback()
        if "unique" in str(e).lower() or "duplicate key" in str(e).lower():
            raise HTTPException(
                status_code=409,
                detail="This email is already registered. Please sign in with your existing account.",
            ) from e
        raise


def resolve_user_groomer(db: Session, user: User) -> Optional[Groomer]:
    """
    Groomer the user schedules for:
    1. the linked groomer, if still active
    2. an active groomer with the same email (linked for next time)
    3. the account's first active groomer
    """
    if user.groomer_id:
        groomer = db.query(Groomer).filter(Groomer.id == user.groomer_id).first()
        if groomer and groomer.is_active:
            return groomer

    if user.email:
        groomer = (
            db.query(Groomer)
            .filter(
                Groomer.account_id == user.account_id,
                Groomer.email == user.email,
                Groomer.is_active.is_(True),
            )
            .first()
        )
        if groomer:
            user.groomer_id = groomer.id
            db.commit()
            return groomer

    return (
        db.query(Groomer)
        .filter(Groomer.account_id == user.account_id, Groomer.is_active.is_(True))
        .order_by(Groomer.created_at.asc(), Groomer.id.asc())
        .first()
    )


async def get_current_groomer(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Groomer:
    groomer = resolve_user_groomer(db, user)
    if not groomer:
        logger.warning(f"⚠️ No active groomer for account {user.account_id}")
        raise HTTPException(status_code=400, detail="No groomer found")
    return groomer
