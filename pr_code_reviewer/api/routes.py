"""FastAPI routes for the PR Code Reviewer."""

from typing import Annotated, Any

import requests
from fastapi import APIRouter, Depends, Header, HTTPException, Path, Query
from sqlalchemy.orm import Session

from pr_code_reviewer.analyzer import InvalidInputError
from pr_code_reviewer.config import get_settings
from pr_code_reviewer.models import CodeReview
from pr_code_reviewer.services.diff_flattener import NoAnalyzableCodeError
from pr_code_reviewer.services.review_service import ReviewService
from pr_code_reviewer.utils import get_logger
from pr_code_reviewer.utils.database import get_db

logger = get_logger(__name__)
router = APIRouter()


def get_github_token(authorization: Annotated[str | None, Header()] = None) -> str | None:
    """Extract a GitHub token from the Authorization header, falling back to settings."""
    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() in ("bearer", "token"):
            return parts[1]
    return get_settings().github_token


@router.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint."""
    settings = get_settings()
    return {
        "message": f"{settings.app_name} API",
        "version": settings.app_version,
        "endpoints": {
            "analyze": "/analyze",
            "review": "/review",
            "reviews": "/reviews",
        },
    }


@router.post("/analyze")
def analyze_code(
    payload: dict[str, Any],
    db: Annotated[Session, Depends(get_db)],
) -> dict[str, Any]:
    """Analyze a block of source code."""
    if "code" not in payload:
        raise HTTPException(status_code=400, detail="Missing required field: code")

    code = payload["code"]
    if isinstance(code, str) and len(code) > get_settings().max_analysis_length:
        raise HTTPException(status_code=413, detail="Code exceeds maximum analysis length")

    try:
        service = ReviewService(session=db)
        return service.analyze_code(
            code,
            payload.get("language"),
            payload.get("context_label") or "",
        )
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except Exception as e:
        logger.exception("Error analyzing code")
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.post("/review")
def review_pull_request(
    payload: dict[str, Any],
    db: Annotated[Session, Depends(get_db)],
    token: Annotated[str | None, Depends(get_github_token)],
) -> dict[str, Any]:
    """Review the changes of a GitHub pull request."""
    if not payload.get("repository"):
        raise HTTPException(status_code=400, detail="Repository selection is required")
    if not payload.get("pr_number"):
        raise HTTPException(status_code=400, detail="Pull Request number is required")
    if not token:
        raise HTTPException(status_code=401, detail="GitHub token required to fetch PR changes")

    try:
        pr_number = int(payload["pr_number"])
    except (TypeError, ValueError) as e:
        raise HTTPException(status_code=400, detail="Pull Request number must be an integer") from e

    try:
        service = ReviewService(session=db, github_token=token)
        result = service.review_pull_request(payload["repository"], pr_number)
    except (ValueError, NoAnalyzableCodeError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except requests.RequestException as e:
        logger.exception("Failed to fetch PR from GitHub")
        raise HTTPException(status_code=502, detail="Failed to fetch PR changes from GitHub") from e
    except Exception as e:
        logger.exception("Error reviewing pull request")
        raise HTTPException(status_code=500, detail="Internal server error") from e

    logger.info(
        "Review completed for %s#%s: score %s, severity %s, %s issues",
        payload["repository"],
        pr_number,
        result["quality_score"],
        result["severity"],
        result["issues_count"],
    )
    return result


@router.get("/reviews")
def get_reviews(
    db: Annotated[Session, Depends(get_db)],
    skip: Annotated[int, Query(ge=0)] = 0,
    limit: Annotated[int, Query(ge=1, le=1000)] = 50,
    repository: str | None = None,
) -> dict[str, Any]:
    """Get stored reviews, newest first."""
    try:
        query = db.query(CodeReview)
        if repository:
            query = query.filter(CodeReview.repository_name == repository)

        total = query.count()
        reviews = query.order_by(CodeReview.created_at.desc(), CodeReview.id.desc()).offset(skip).limit(limit).all()

        return {
            "reviews": [review.to_dict() for review in reviews],
            "total": total,
            "skip": skip,
            "limit": limit,
        }
    except Exception as e:
        logger.exception("Error getting reviews")
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/reviews/{review_id}")
def get_review(
    review_id: Annotated[int, Path(ge=1)],
    db: Annotated[Session, Depends(get_db)],
) -> dict[str, Any]:
    """Get a stored review."""
    review = db.query(CodeReview).filter(CodeReview.id == review_id).first()
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    return review.to_dict()
