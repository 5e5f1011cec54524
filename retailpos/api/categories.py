from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from retailpos.database import get_db
from retailpos.schemas.product import CategoryCreate, CategoryResponse
from retailpos.services.category_service import CategoryService
from retailpos.services.exceptions import CategoryNotFoundError, ProductInUseError, ValidationError

router = APIRouter(prefix="/categories", tags=["Categories"])


@router.post(
    "/",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a category"
)
def create_category(
    category_data: CategoryCreate,
    db: Session = Depends(get_db)
):
    service = CategoryService(db)
    try:
        return service.create(category_data)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))


@router.get(
    "/",
    response_model=list[CategoryResponse],
    summary="List categories"
)
def list_categories(db: Session = Depends(get_db)):
    return CategoryService(db).get_all()


@router.get(
    "/{category_id}",
    response_model=CategoryResponse,
    summary="Get category by ID"
)
def get_category(
    category_id: int,
    db: Session = Depends(get_db)
):
    category = CategoryService(db).get_by_id(category_id)
    if not category:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Category with ID {category_id} not found"
        )
    return category


@router.delete(
    "/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a category",
    description="Delete a category that has no products."
)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db)
):
    try:
        CategoryService(db).delete(category_id)
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ProductInUseError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return None
