# common/serializers.py
import logging

from django.forms.models import model_to_dict
from rest_framework import serializers

from common.exceptions import DonneesIncoherentes
from common.models import HistoriqueValidation

logger = logging.getLogger(__name__)


class HistoriqueValidationSerializer(serializers.ModelSerializer):
    utilisateur_email = serializers.EmailField(source='utilisateur.email', read_only=True, default=None)

    class Meta:
        model = HistoriqueValidation
        fields = ['id', 'action', 'ancien_statut', 'nouveau_statut', 'utilisateur',
                  'utilisateur_email', 'commentaire', 'motif_rejet', 'date_action']


class CoherenceSerializerMixin(serializers.Serializer):
    """
    Contrôle de cohérence à l'écriture.

    Les erreurs rejettent la saisie (400) sauf si `forcer` est vrai ;
    la saisie est alors enregistrée et marquée incohérente.
    """
    forcer = serializers.BooleanField(write_only=True, required=False, default=False)

    def controler(self, donnees):
        raise NotImplementedError

    def donnees_completes(self, attrs):
        donnees = model_to_dict(self.instance) if self.instance is not None else {}
        for champ, valeur in attrs.items():
            donnees[champ] = getattr(valeur, 'pk', valeur)
        return donnees

    def validate(self, attrs):
        attrs = super().validate(attrs)
        forcer = attrs.pop('forcer', False)

        resultat = self.controler(self.donnees_completes(attrs))
        self.controle = resultat
        self.saisie_forcee = forcer and not resultat.est_valide

        if not resultat.est_valide and not forcer:
            raise DonneesIncoherentes(resultat.erreurs, resultat.avertissements)

        if self.saisie_forcee:
            logger.warning(f"Saisie forcée malgré incohérences: {resultat.erreurs}")

        return attrs


class WorkflowActionSerializer(serializers.Serializer):
    commentaire = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class RejetSerializer(WorkflowActionSerializer):
    motif_rejet = serializers.CharField(allow_blank=False)


class BulkActionSerializer(WorkflowActionSerializer):
    ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class BulkRejetSerializer(BulkActionSerializer):
    motif_rejet = serializers.CharField(allow_blank=False)
