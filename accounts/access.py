# accounts/access.py
from django.db.models import Q

from accounts import roles


class TerritorialAccessMixin:
    """
    Contrôle d'accès territorial de l'utilisateur.

    L'accès descend en cascade : un département est accessible par
    affectation directe ou via la région de l'utilisateur, un arrondissement
    par affectation directe ou via son département, un bureau de vote par
    affectation directe ou via son arrondissement.
    """

    # ========== ACCÈS COMPLET ==========

    def a_acces_complet(self):
        """Les administrateurs ont accès à tout le territoire"""
        return self.is_active and (self.role == roles.ADMINISTRATEUR or self.is_superuser)

    def peut_editer(self):
        return self.a_acces_complet() or (self.is_active and self.role in roles.ROLES_EDITION)

    # ========== QUERYSETS ACCESSIBLES ==========

    def get_departements_accessibles(self):
        from geography.models import Departement

        if self.a_acces_complet():
            return Departement.objects.all()

        condition = Q(code__in=self.affectations_departement.values('departement_id'))
        if self.region_id:
            condition |= Q(region_id=self.region_id)
        return Departement.objects.filter(condition)

    def get_arrondissements_accessibles(self):
        from geography.models import Arrondissement

        if self.a_acces_complet():
            return Arrondissement.objects.all()

        return Arrondissement.objects.filter(
            Q(code__in=self.affectations_arrondissement.values('arrondissement_id')) |
            Q(departement__in=self.get_departements_accessibles())
        )

    def get_bureaux_vote_accessibles(self):
        from geography.models import BureauVote

        if self.a_acces_complet():
            return BureauVote.objects.all()

        return BureauVote.objects.filter(
            Q(code__in=self.affectations_bureau_vote.values('bureau_vote_id')) |
            Q(arrondissement__in=self.get_arrondissements_accessibles())
        )

    def get_regions_accessibles(self):
        from geography.models import Region

        if self.a_acces_complet():
            return Region.objects.all()
        return Region.objects.filter(
            Q(code__in=self.get_departements_accessibles().values('region_id')) |
            Q(code__in=self.get_arrondissements_accessibles().values('region_id'))
        )

    # ========== VÉRIFICATIONS UNITAIRES ==========

    def peut_acceder_departement(self, departement):
        if self.a_acces_complet():
            return True
        return self.get_departements_accessibles().filter(pk=departement.pk).exists()

    def peut_acceder_arrondissement(self, arrondissement):
        if self.a_acces_complet():
            return True
        return self.get_arrondissements_accessibles().filter(pk=arrondissement.pk).exists()

    def peut_acceder_bureau_vote(self, bureau_vote):
        if self.a_acces_complet():
            return True
        return self.get_bureaux_vote_accessibles().filter(pk=bureau_vote.pk).exists()

    def peut_acceder_region(self, region):
        if self.a_acces_complet():
            return True
        return self.get_regions_accessibles().filter(pk=region.pk).exists()

    def peut_editer_departement(self, departement):
        return self.peut_editer() and self.peut_acceder_departement(departement)

    def peut_editer_arrondissement(self, arrondissement):
        return self.peut_editer() and self.peut_acceder_arrondissement(arrondissement)

    def peut_editer_bureau_vote(self, bureau_vote):
        return self.peut_editer() and self.peut_acceder_bureau_vote(bureau_vote)

    def peut_acceder_territoire(self, territoire):
        """Aiguille vers la vérification adaptée au niveau du territoire"""
        from geography.models import Arrondissement, BureauVote, Departement, Region

        if territoire is None:
            return self.a_acces_complet()
        if isinstance(territoire, BureauVote):
            return self.peut_acceder_bureau_vote(territoire)
        if isinstance(territoire, Arrondissement):
            return self.peut_acceder_arrondissement(territoire)
        if isinstance(territoire, Departement):
            return self.peut_acceder_departement(territoire)
        if isinstance(territoire, Region):
            return self.peut_acceder_region(territoire)
        raise TypeError(f"Territoire non géré: {territoire!r}")

    def peut_editer_territoire(self, territoire):
        return self.peut_editer() and self.peut_acceder_territoire(territoire)

    # ========== FILTRAGE DE QUERYSETS ==========

    def filtrer_par_territoire(self, queryset, bureau_vote=None, arrondissement=None,
                               departement=None):
        """
        Restreint un queryset au territoire accessible.

        Un seul chemin de lookup est attendu, par exemple
        filtrer_par_territoire(qs, bureau_vote='resultat__bureau_vote').
        """
        if self.a_acces_complet():
            return queryset

        if bureau_vote:
            return queryset.filter(**{f"{bureau_vote}__in": self.get_bureaux_vote_accessibles()})
        if arrondissement:
            return queryset.filter(
                **{f"{arrondissement}__in": self.get_arrondissements_accessibles()}
            )
        if departement:
            return queryset.filter(**{f"{departement}__in": self.get_departements_accessibles()})

        raise ValueError("Un chemin vers le territoire est requis")

    # ========== RÉSUMÉ ==========

    def resume_acces(self):
        """Affectations de l'utilisateur avec les libellés des territoires parents"""
        departements = [
            {
                'code': a.departement.code,
                'libelle': a.departement.libelle,
                'region': a.departement.region.libelle,
                'date_affectation': a.date_affectation,
            }
            for a in self.affectations_departement.select_related('departement__region')
        ]
        arrondissements = [
            {
                'code': a.arrondissement.code,
                'libelle': a.arrondissement.libelle,
                'departement': a.arrondissement.departement.libelle,
                'region': a.arrondissement.region.libelle,
                'date_affectation': a.date_affectation,
            }
            for a in self.affectations_arrondissement.select_related(
                'arrondissement__departement', 'arrondissement__region'
            )
        ]
        bureaux_vote = [
            {
                'code': a.bureau_vote.code,
                'designation': a.bureau_vote.designation,
                'arrondissement': a.bureau_vote.arrondissement.libelle,
                'departement': a.bureau_vote.arrondissement.departement.libelle,
                'date_affectation': a.date_affectation,
            }
            for a in self.affectations_bureau_vote.select_related(
                'bureau_vote__arrondissement__departement'
            )
        ]

        return {
            'utilisateur': self.pk,
            'email': self.email,
            'role': self.role,
            'acces_complet': self.a_acces_complet(),
            'perimetre': roles.get_perimetre(self.role),
            'region': (
                {'code': self.region.code, 'libelle': self.region.libelle}
                if self.region_id else None
            ),
            'departements': departements,
            'arrondissements': arrondissements,
            'bureaux_vote': bureaux_vote,
            'totaux': {
                'departements': self.get_departements_accessibles().count(),
                'arrondissements': self.get_arrondissements_accessibles().count(),
                'bureaux_vote': self.get_bureaux_vote_accessibles().count(),
            },
        }
