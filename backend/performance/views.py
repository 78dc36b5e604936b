from __future__ import annotations

from rest_framework import views
from rest_framework.response import Response

from accounts.permissions import Capability, IsStaffRole, capability_permission

from .services.badges import award_badges, leaderboard


class AwardBadgesView(views.APIView):
    permission_classes = [capability_permission(Capability.AWARD_BADGES)]

    def post(self, request):
        return Response({"awarded": award_badges()})


class LeaderboardView(views.APIView):
    permission_classes = [IsStaffRole]

    def get(self, request):
        period = request.query_params.get("period", "month")
        metric = request.query_params.get("metric", "revenue")
        entries = leaderboard(period, metric)
        return Response({
            "period": period,
            "metric": metric,
            "rankings": [
                {"rank": i, "employee": e.employee_id, "name": e.name, "value": str(e.value)}
                for i, e in enumerate(entries, start=1)
            ],
        })
