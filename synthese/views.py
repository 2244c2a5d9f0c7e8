# synthese/views.py
from django.shortcuts import get_object_or_404
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.models import WorkflowModel
from geography.models import Arrondissement, Departement, Region
from resultats.models import ResultatDepartement
from synthese.services.synthese_service import synthese_service


class SyntheseViewSet(viewsets.ViewSet):
    """
    Synthèses des résultats par niveau territorial.

    Les synthèses d'un territoire hors périmètre renvoient 403, un code
    inconnu renvoie 404. La synthèse nationale est restreinte au
    périmètre de l'utilisateur lorsqu'il n'a pas un accès complet.
    """
    permission_classes = [IsAuthenticated]

    def _verifier_acces(self, territoire):
        if not self.request.user.peut_acceder_territoire(territoire):
            raise PermissionDenied("Ce territoire n'est pas dans votre périmètre.")

    def _force_refresh(self, request):
        return request.query_params.get('refresh') == 'true'

    @action(detail=False, methods=['get'])
    def national(self, request):
        if self._force_refresh(request) and request.user.a_acces_complet():
            return Response(synthese_service.get_synthese_nationale(force_refresh=True))
        return Response(synthese_service.get_synthese_utilisateur(request.user))

    @action(detail=False, methods=['get'], url_path=r'region/(?P<code>\d+)')
    def region(self, request, code=None):
        region = get_object_or_404(Region, pk=code)
        self._verifier_acces(region)
        return Response(synthese_service.get_synthese_region(
            region, force_refresh=self._force_refresh(request)
        ))

    @action(detail=False, methods=['get'], url_path=r'departement/(?P<code>\d+)')
    def departement(self, request, code=None):
        departement = get_object_or_404(Departement, pk=code)
        self._verifier_acces(departement)
        return Response(synthese_service.get_synthese_departement(
            departement, force_refresh=self._force_refresh(request)
        ))

    @action(detail=False, methods=['get'], url_path=r'arrondissement/(?P<code>\d+)')
    def arrondissement(self, request, code=None):
        arrondissement = get_object_or_404(Arrondissement, pk=code)
        self._verifier_acces(arrondissement)
        return Response(synthese_service.get_synthese_arrondissement(
            arrondissement, force_refresh=self._force_refresh(request)
        ))

    @action(detail=False, methods=['get'], url_path='resultats-nationaux')
    def resultats_nationaux(self, request):
        """
        Voix par parti cumulées sur les départements accessibles.

        Paramètres: statut (EN_ATTENTE, VALIDE, APPROUVE, REJETE),
        details=true pour inclure la fiche des partis.
        """
        statut = request.query_params.get('statut')
        if statut and statut not in dict(WorkflowModel.STATUT_CHOICES):
            raise ValidationError({'statut': f"Statut inconnu: {statut}"})

        queryset = request.user.filtrer_par_territoire(
            ResultatDepartement.objects.all(), departement='departement'
        )
        return Response(synthese_service.resultats_nationaux(
            queryset,
            statut=statut,
            details=request.query_params.get('details') == 'true',
        ))

    @action(detail=False, methods=['get'])
    def stats(self, request):
        return Response(synthese_service.statistiques(request.user))
