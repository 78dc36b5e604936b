from django.urls import path

from .views import AwardBadgesView, LeaderboardView

urlpatterns = [
    path('badges/award', AwardBadgesView.as_view(), name='badges-award'),
    path('leaderboard', LeaderboardView.as_view(), name='performance-leaderboard'),
]
