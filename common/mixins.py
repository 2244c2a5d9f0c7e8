# common/mixins.py
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from accounts.models import AuditLog
from common.exceptions import TransitionInvalide
from common.serializers import (
    BulkActionSerializer, BulkRejetSerializer, HistoriqueValidationSerializer,
    RejetSerializer, WorkflowActionSerializer
)
from common.utils import get_client_ip
from participation.services.validation_service import validation_service


class SaisieViewSetMixin:
    """
    Écriture des saisies : colonnes d'audit, retour en attente d'une
    saisie rejetée corrigée et trace des saisies forcées.
    """

    def get_territoire(self, obj):
        return obj.territoire

    def perform_create(self, serializer):
        instance = serializer.save(code_createur=self.request.user)
        self.tracer_saisie_forcee(serializer, instance)

    def perform_update(self, serializer):
        if getattr(serializer.instance, 'statut', None) == 'APPROUVE':
            raise TransitionInvalide("Une saisie approuvée ne peut plus être modifiée.")

        instance = serializer.save(code_modificateur=self.request.user)
        if getattr(instance, 'statut', None) == 'REJETE':
            validation_service.corriger(instance, self.request.user)
        self.tracer_saisie_forcee(serializer, instance)

    def tracer_saisie_forcee(self, serializer, instance):
        if not getattr(serializer, 'saisie_forcee', False):
            return
        AuditLog.log(
            user=self.request.user,
            action='SAISIE_FORCEE',
            description=f"{instance} enregistré malgré des incohérences",
            target=instance,
            details={'erreurs': serializer.controle.erreurs},
            ip_address=get_client_ip(self.request)
        )


class WorkflowViewSetMixin:
    """Actions de validation, approbation et rejet (unitaires et en masse)"""

    def _workflow_reponse(self, objet):
        return Response(self.get_serializer(objet).data)

    @action(detail=True, methods=['post'])
    def valider(self, request, pk=None):
        objet = self.get_object()
        params = WorkflowActionSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        validation_service.valider(objet, request.user, params.validated_data.get('commentaire'))
        return self._workflow_reponse(objet)

    @action(detail=True, methods=['post'])
    def approuver(self, request, pk=None):
        objet = self.get_object()
        params = WorkflowActionSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        validation_service.approuver(objet, request.user, params.validated_data.get('commentaire'))
        return self._workflow_reponse(objet)

    @action(detail=True, methods=['post'])
    def rejeter(self, request, pk=None):
        objet = self.get_object()
        params = RejetSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        try:
            validation_service.rejeter(
                objet,
                request.user,
                params.validated_data['motif_rejet'],
                params.validated_data.get('commentaire')
            )
        except ValueError as e:
            raise ValidationError({'motif_rejet': str(e)})
        return self._workflow_reponse(objet)

    @action(detail=True, methods=['get'])
    def historique(self, request, pk=None):
        objet = self.get_object()
        serializer = HistoriqueValidationSerializer(objet.historique, many=True)
        return Response(serializer.data)

    # ========== EN MASSE ==========

    @action(detail=False, methods=['post'], url_path='bulk/valider')
    def bulk_valider(self, request):
        params = BulkActionSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        resultat = validation_service.bulk_valider(
            self.get_queryset(), params.validated_data['ids'], request.user,
            params.validated_data.get('commentaire')
        )
        return Response(resultat, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'], url_path='bulk/approuver')
    def bulk_approuver(self, request):
        params = BulkActionSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        resultat = validation_service.bulk_approuver(
            self.get_queryset(), params.validated_data['ids'], request.user,
            params.validated_data.get('commentaire')
        )
        return Response(resultat, status=status.HTTP_200_OK)

    @action(detail=False, methods=['post'], url_path='bulk/rejeter')
    def bulk_rejeter(self, request):
        params = BulkRejetSerializer(data=request.data)
        params.is_valid(raise_exception=True)

        resultat = validation_service.bulk_rejeter(
            self.get_queryset(), params.validated_data['ids'], request.user,
            params.validated_data['motif_rejet'], params.validated_data.get('commentaire')
        )
        return Response(resultat, status=status.HTTP_200_OK)
