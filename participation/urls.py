# participation/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from participation.views import (
    CoherenceViewSet, ParticipationBureauVoteViewSet, ParticipationCommuneViewSet,
    ParticipationDepartementViewSet
)

app_name = 'participation'

router = DefaultRouter()
router.register(r'participation-bureau', ParticipationBureauVoteViewSet, basename='participation-bureau')
router.register(r'participation-commune', ParticipationCommuneViewSet, basename='participation-commune')
router.register(r'participation-departement', ParticipationDepartementViewSet,
                basename='participation-departement')
router.register(r'coherence', CoherenceViewSet, basename='coherence')

urlpatterns = [
    path('', include(router.urls)),
]
