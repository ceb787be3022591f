from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.core.authz import Action
from storefront.db.deps import get_db, require
from storefront.schemas.common import Envelope, ok
from storefront.schemas.dashboard import DashboardStats
from storefront.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("", response_model=Envelope[DashboardStats], dependencies=[Depends(require(Action.read_dashboard))])
def dashboard_stats(db: Session = Depends(get_db)):
    return ok(DashboardService(db).get_stats())
