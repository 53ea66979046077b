"""Admin news router."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import NotFoundError
from coursehub.middleware.auth import require_admin
from coursehub.models.news import News
from coursehub.models.user import User
from coursehub.schemas.common import ApiResponse, Pagination, update_changes
from coursehub.schemas.news import NewsCreate, NewsListResponse, NewsResponse, NewsUpdate, news_to_response
from coursehub.services.audit import log_action

router = APIRouter(prefix="/api/admin/news", tags=["admin-news"])


def _get_news(db: Session, news_id: str) -> News:
    item = db.query(News).filter(News.id == news_id).first()
    if not item:
        raise NotFoundError("News")
    return item


@router.get("", response_model=ApiResponse[NewsListResponse])
def list_news(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    total = db.query(News).count()
    items = (
        db.query(News)
        .order_by(News.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return ApiResponse(
        data=NewsListResponse(
            news=[news_to_response(n) for n in items],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.post("", response_model=ApiResponse[NewsResponse], status_code=201)
def create_news(req: NewsCreate, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    item = News(**req.model_dump(), created_by=admin.id)
    db.add(item)
    db.flush()
    log_action(
        db,
        "news_created",
        f'Admin {admin.email} published "{item.title}"',
        actor_id=admin.id,
        entity_type="news",
        entity_id=item.id,
    )
    db.commit()
    db.refresh(item)
    return ApiResponse(data=news_to_response(item), message="News created")


@router.get("/{news_id}", response_model=ApiResponse[NewsResponse])
def get_news(news_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    return ApiResponse(data=news_to_response(_get_news(db, news_id)))


@router.put("/{news_id}", response_model=ApiResponse[NewsResponse])
def update_news(
    news_id: str,
    req: NewsUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    item = _get_news(db, news_id)
    changes = update_changes(req, required=("title", "short_description", "full_description", "is_active"))
    for field, value in changes.items():
        setattr(item, field, value)
    log_action(
        db,
        "news_updated",
        f'Admin {admin.email} updated "{item.title}"',
        actor_id=admin.id,
        entity_type="news",
        entity_id=item.id,
    )
    db.commit()
    db.refresh(item)
    return ApiResponse(data=news_to_response(item), message="News updated")


@router.delete("/{news_id}", response_model=ApiResponse)
def delete_news(news_id: str, db: Session = Depends(get_db), admin: User = Depends(require_admin)):
    item = _get_news(db, news_id)
    title = item.title
    db.delete(item)
    log_action(
        db,
        "news_deleted",
        f'Admin {admin.email} deleted "{title}"',
        actor_id=admin.id,
        entity_type="news",
        entity_id=news_id,
    )
    db.commit()
    return ApiResponse(message="News deleted")
