from flask import Blueprint, jsonify

from ...schemas import ActivityOut, dump_many
from ...services import get_dashboard_metrics, list_activities
from ..decorators import require_permission
from ..session import get_session

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.get("/dashboard/metrics")
@require_permission("dashboard.read")
def metrics_view():
    metrics = get_dashboard_metrics(get_session())
    return jsonify(metrics.model_dump(mode="json", by_alias=True))


@dashboard_bp.get("/dashboard/activities")
@require_permission("dashboard.read")
def activities_view():
    return jsonify(dump_many(ActivityOut, list_activities(get_session())))
