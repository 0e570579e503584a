import logging
from collections.abc import Callable
from typing import Any

import httpx
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import SessionLocal
from app.core.errors import BadRequest, Forbidden, NotFound
from app.core.timestamps import utcnow
from app.models.social import SocialAccount
from app.models.users import Influencer, User
from app.schemas.social import Platform
from app.schemas.users import UserRole

logger = logging.getLogger(__name__)

settings = get_settings()

YOUTUBE_CHANNELS = "https://www.googleapis.com/youtube/v3/channels"
HTTP_TIMEOUT = 15


class SocialSyncError(Exception):
    """A platform lookup failed or returned something unusable."""


def _as_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _rate(interactions: int, posts: int, followers: int) -> float:
    if posts <= 0 or followers <= 0:
        return 0.0
    return round(interactions / posts / followers * 100, 2)


def _rapidapi_headers(host: str) -> dict[str, str]:
    if not settings.rapidapi_key:
        raise BadRequest("RAPIDAPI_KEY is not configured")
    return {"X-RapidAPI-Key": settings.rapidapi_key, "X-RapidAPI-Host": host}


def _get_json(url: str, params: dict[str, str], headers: dict[str, str] | None = None) -> dict:
    try:
        with httpx.Client(timeout=HTTP_TIMEOUT) as client:
            response = client.get(url, params=params, headers=headers)
            response.raise_for_status()
            return response.json()
    except httpx.HTTPError as exc:
        raise SocialSyncError(f"Request to {url} failed: {exc}") from exc
    except ValueError as exc:
        raise SocialSyncError(f"Invalid JSON from {url}") from exc


def fetch_youtube_stats(username: str) -> dict[str, Any]:
    if not settings.youtube_api_key:
        raise BadRequest("YOUTUBE_API_KEY is not configured")
    body = _get_json(
        YOUTUBE_CHANNELS,
        {"part": "statistics", "forHandle": f"@{username}", "key": settings.youtube_api_key},
    )
    items = body.get("items") or []
    if not items:
        raise SocialSyncError(f"YouTube channel @{username} not found")
    stats = items[0].get("statistics", {})
    followers = _as_int(stats.get("subscriberCount"))
    return {
        "follower_count": followers,
        "engagement_rate": _rate(
            _as_int(stats.get("viewCount")), _as_int(stats.get("videoCount")), followers
        ),
    }


def fetch_tiktok_stats(username: str) -> dict[str, Any]:
    host = settings.rapidapi_tiktok_host
    body = _get_json(
        f"https://{host}/user/info",
        {"unique_id": username},
        _rapidapi_headers(host),
    )
    stats = (body.get("data") or {}).get("stats")
    if not stats:
        raise SocialSyncError(f"TikTok user @{username} not found")
    followers = _as_int(stats.get("followerCount"))
    return {
        "follower_count": followers,
        "engagement_rate": _rate(
            _as_int(stats.get("heartCount")), _as_int(stats.get("videoCount")), followers
        ),
    }


def fetch_twitter_stats(username: str) -> dict[str, Any]:
    host = settings.rapidapi_twitter_host
    body = _get_json(
        f"https://{host}/user",
        {"username": username},
        _rapidapi_headers(host),
    )
    if "followers_count" not in body and "sub_count" not in body:
        raise SocialSyncError(f"Twitter user @{username} not found")
    followers = _as_int(body.get("followers_count", body.get("sub_count")))
    return {
        "follower_count": followers,
        "engagement_rate": _rate(
            _as_int(body.get("favourites_count")),
            _as_int(body.get("statuses_count")),
            followers,
        ),
    }


FETCHERS: dict[Platform, Callable[[str], dict[str, Any]]] = {
    Platform.youtube: fetch_youtube_stats,
    Platform.tiktok: fetch_tiktok_stats,
    Platform.twitter: fetch_twitter_stats,
}


def register_social_account(
    db: Session, influencer: Influencer, platform: Platform, username: str
) -> SocialAccount:
    account = db.execute(
        select(SocialAccount).where(
            SocialAccount.influencer_id == influencer.id,
            SocialAccount.platform == platform,
        )
    ).scalar_one_or_none()
    if account is None:
        account = SocialAccount(
            influencer_id=influencer.id, platform=platform, username=username
        )
        db.add(account)
    elif account.username != username:
        account.username = username
        account.follower_count = 0
        account.engagement_rate = 0.0
        account.last_synced_at = None
    db.commit()
    db.refresh(account)
    return account


def _refresh_account(account: SocialAccount) -> None:
    stats = FETCHERS[Platform(account.platform)](account.username)
    account.follower_count = stats["follower_count"]
    account.engagement_rate = stats["engagement_rate"]
    account.last_synced_at = utcnow()


def sync_social_account(db: Session, user: User, account_id: int) -> SocialAccount:
    account = db.get(SocialAccount, account_id)
    if account is None:
        raise NotFound("Social account not found")
    if user.role != UserRole.admin and (
        user.influencer is None or account.influencer_id != user.influencer.id
    ):
        raise Forbidden("Not allowed to sync this account")

    try:
        _refresh_account(account)
    except SocialSyncError as exc:
        raise BadRequest(str(exc)) from exc
    db.commit()
    db.refresh(account)
    logger.info("Synced %s account %s", account.platform, account.id)
    return account


def sync_all_influencer_accounts(db: Session, influencer_id: int) -> dict[str, list]:
    """Sync every account of one influencer; a failing platform does not stop the rest."""
    accounts = db.execute(
        select(SocialAccount)
        .where(SocialAccount.influencer_id == influencer_id)
        .order_by(SocialAccount.id)
    ).scalars()

    synced: list[SocialAccount] = []
    failed: list[dict[str, Any]] = []
    for account in accounts:
        try:
            _refresh_account(account)
        except (SocialSyncError, BadRequest) as exc:
            logger.warning(
                "Sync failed for %s account %s: %s", account.platform, account.id, exc
            )
            failed.append(
                {"account_id": account.id, "platform": account.platform, "error": str(exc)}
            )
            continue
        synced.append(account)
    db.commit()
    for account in synced:
        db.refresh(account)
    return {"synced": synced, "failed": failed}


def sync_all_influencers() -> None:
    """Background job; owns its session and only logs failures."""
    db = SessionLocal()
    try:
        influencer_ids = db.execute(
            select(SocialAccount.influencer_id).distinct()
        ).scalars().all()
        for influencer_id in influencer_ids:
            result = sync_all_influencer_accounts(db, influencer_id)
            logger.info(
                "Influencer %s: %d synced, %d failed",
                influencer_id,
                len(result["synced"]),
                len(result["failed"]),
            )
    except Exception:
        logger.exception("Bulk social sync aborted")
        db.rollback()
    finally:
        db.close()


def get_sync_status(db: Session, user: User) -> list[SocialAccount]:
    stmt = select(SocialAccount).order_by(SocialAccount.id)
    if user.role != UserRole.admin:
        if user.influencer is None:
            return []
        stmt = stmt.where(SocialAccount.influencer_id == user.influencer.id)
    return list(db.execute(stmt).scalars())
