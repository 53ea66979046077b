"""News router — public news feed."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from coursehub.database import get_db
from coursehub.errors import NotFoundError
from coursehub.models.news import News
from coursehub.schemas.common import ApiResponse, Pagination
from coursehub.schemas.news import NewsListResponse, NewsResponse, news_to_response

router = APIRouter(prefix="/api/news", tags=["news"])


@router.get("", response_model=ApiResponse[NewsListResponse])
def list_news(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = db.query(News).filter(News.is_active.is_(True))
    total = query.count()
    items = (
        query.order_by(News.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return ApiResponse(
        data=NewsListResponse(
            news=[news_to_response(n, full=False) for n in items],
            pagination=Pagination.build(page, limit, total),
        )
    )


@router.get("/{news_id}", response_model=ApiResponse[NewsResponse])
def get_news(news_id: str, db: Session = Depends(get_db)):
    item = db.query(News).filter(News.id == news_id, News.is_active.is_(True)).first()
    if not item:
        raise NotFoundError("News")
    return ApiResponse(data=news_to_response(item))
