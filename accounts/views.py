# accounts/views.py
from django.shortcuts import get_object_or_404
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from geography.models import Arrondissement, BureauVote, Departement


class TerritorialAccessViewSet(viewsets.ViewSet):
    """
    Interrogation des droits territoriaux de l'utilisateur connecté.

    Un code inconnu renvoie 404 ; un code connu mais hors périmètre
    renvoie {"hasAccess": false}.
    """
    permission_classes = [IsAuthenticated]

    @action(detail=False, methods=['get'])
    def summary(self, request):
        return Response(request.user.resume_acces())

    @action(detail=False, methods=['get'], url_path=r'department/(?P<code>\d+)')
    def department(self, request, code=None):
        departement = get_object_or_404(Departement, pk=code)
        return Response({'hasAccess': request.user.peut_acceder_departement(departement)})

    @action(detail=False, methods=['get'], url_path=r'arrondissement/(?P<code>\d+)')
    def arrondissement(self, request, code=None):
        arrondissement = get_object_or_404(Arrondissement, pk=code)
        return Response({'hasAccess': request.user.peut_acceder_arrondissement(arrondissement)})

    @action(detail=False, methods=['get'], url_path=r'bureau-vote/(?P<code>\d+)')
    def bureau_vote(self, request, code=None):
        bureau = get_object_or_404(BureauVote, pk=code)
        return Response({'hasAccess': request.user.peut_acceder_bureau_vote(bureau)})

    @action(detail=False, methods=['get'], url_path=r'can-edit-department/(?P<code>\d+)')
    def can_edit_department(self, request, code=None):
        departement = get_object_or_404(Departement, pk=code)
        return Response({'canEdit': request.user.peut_editer_departement(departement)})

    @action(detail=False, methods=['get'], url_path=r'can-edit-arrondissement/(?P<code>\d+)')
    def can_edit_arrondissement(self, request, code=None):
        arrondissement = get_object_or_404(Arrondissement, pk=code)
        return Response({'canEdit': request.user.peut_editer_arrondissement(arrondissement)})

    @action(detail=False, methods=['get'], url_path=r'can-edit-bureau-vote/(?P<code>\d+)')
    def can_edit_bureau_vote(self, request, code=None):
        bureau = get_object_or_404(BureauVote, pk=code)
        return Response({'canEdit': request.user.peut_editer_bureau_vote(bureau)})

    @action(detail=False, methods=['get'], url_path=r'can-edit-participation-commune/(?P<code>\d+)')
    def can_edit_participation_commune(self, request, code=None):
        """La saisie communale suit les droits d'édition de l'arrondissement"""
        arrondissement = get_object_or_404(Arrondissement, pk=code)
        return Response({'canEdit': request.user.peut_editer_arrondissement(arrondissement)})
