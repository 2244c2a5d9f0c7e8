# geography/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from geography.views import (
    ArrondissementViewSet, BureauVoteViewSet, DepartementViewSet, RegionViewSet
)

app_name = 'geography'

router = DefaultRouter()
router.register(r'regions', RegionViewSet, basename='region')
router.register(r'departements', DepartementViewSet, basename='departement')
router.register(r'arrondissements', ArrondissementViewSet, basename='arrondissement')
router.register(r'bureaux-vote', BureauVoteViewSet, basename='bureau-vote')

urlpatterns = [
    path('', include(router.urls)),
]
