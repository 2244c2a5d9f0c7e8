# resultats/urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from resultats.views import (
    CandidatViewSet, PartiPolitiqueViewSet, PvArrondissementViewSet, PvDepartementViewSet,
    RedressementBureauVoteViewSet, RedressementCandidatViewSet, ResultatBureauVoteViewSet,
    ResultatDepartementViewSet
)

app_name = 'resultats'

router = DefaultRouter()
router.register(r'partis', PartiPolitiqueViewSet, basename='parti')
router.register(r'candidats', CandidatViewSet, basename='candidat')
router.register(r'resultats-bureau', ResultatBureauVoteViewSet, basename='resultat-bureau')
router.register(r'resultats-departement', ResultatDepartementViewSet, basename='resultat-departement')
router.register(r'redressements-bureau', RedressementBureauVoteViewSet, basename='redressement-bureau')
router.register(r'redressements-candidat', RedressementCandidatViewSet,
                basename='redressement-candidat')
router.register(r'pv-arrondissement', PvArrondissementViewSet, basename='pv-arrondissement')
router.register(r'pv-departement', PvDepartementViewSet, basename='pv-departement')

urlpatterns = [
    path('', include(router.urls)),
]
