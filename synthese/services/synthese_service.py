# synthese/services/synthese_service.py
import logging
from collections import Counter, OrderedDict

from django.conf import settings
from django.core.cache import cache
from django.db.models import Avg, Count, Sum
from django.utils import timezone

from common.utils import pourcentage, taux_participation
from geography.models import Arrondissement, BureauVote, Departement, Region
from participation.models import ParticipationBureauVote, ParticipationDepartement
from resultats.models import Candidat, PartiPolitique, ResultatBureauVote, ResultatDepartement

logger = logging.getLogger(__name__)

NIVEAUX = ('arrondissement', 'departement', 'region')


class SyntheseService:
    """
    Synthèse des saisies par bureau de vote, agrégées par arrondissement,
    département, région et au niveau national.

    Les synthèses territoriales sont mises en cache et invalidées par les
    signaux des saisies de bureau.
    """

    # ========== CACHE ==========

    def cle(self, niveau, code=None):
        return f"synthese_{niveau}_{code}" if code is not None else f"synthese_{niveau}"

    def _en_cache(self, cle, calcul, force_refresh=False):
        if not force_refresh:
            cached = cache.get(cle)
            if cached is not None:
                return cached

        donnees = calcul()
        cache.set(cle, donnees, settings.SYNTHESE_CACHE_TTL)
        return donnees

    def invalider_bureau(self, bureau_vote):
        """Invalide toutes les synthèses qui englobent un bureau de vote"""
        arrondissement = bureau_vote.arrondissement
        cles = [
            self.cle('arrondissement', arrondissement.code),
            self.cle('departement', arrondissement.departement_id),
            self.cle('region', arrondissement.region_id),
            self.cle('national'),
        ]
        cache.delete_many(cles)
        logger.info(f"Synthèses invalidées pour le bureau {bureau_vote.code}")

    def invalider_departement(self, departement):
        cles = [self.cle('arrondissement', code)
                for code in departement.arrondissements.values_list('code', flat=True)]
        cles += [
            self.cle('departement', departement.code),
            self.cle('region', departement.region_id),
            self.cle('national'),
        ]
        cache.delete_many(cles)
        logger.info(f"Synthèses invalidées pour le département {departement.code}")

    # ========== LIGNES PAR BUREAU ==========

    def lignes_bureaux(self, bureaux):
        """Une ligne par bureau : participation et voix par parti"""
        bureaux = list(bureaux.select_related('arrondissement__departement__region'))
        codes = [b.code for b in bureaux]

        participations = {
            p.bureau_vote_id: p
            for p in ParticipationBureauVote.objects.filter(bureau_vote_id__in=codes)
        }
        voix = {}
        for bureau_id, parti_id, nombre_vote in ResultatBureauVote.objects.filter(
            bureau_vote_id__in=codes
        ).values_list('bureau_vote_id', 'parti_id', 'nombre_vote'):
            voix.setdefault(bureau_id, {})[str(parti_id)] = nombre_vote

        lignes = []
        for bureau in bureaux:
            participation = participations.get(bureau.code)
            arrondissement = bureau.arrondissement
            departement = arrondissement.departement
            lignes.append({
                'code': bureau.code,
                'designation': bureau.designation,
                'arrondissement': {'code': arrondissement.code, 'libelle': arrondissement.libelle},
                'departement': {'code': departement.code, 'libelle': departement.libelle},
                'region': {'code': departement.region.code, 'libelle': departement.region.libelle},
                'saisi': participation is not None,
                'has_incoherence': participation.has_incoherence if participation else False,
                'nombre_inscrit': participation.nombre_inscrit if participation else 0,
                'nombre_votant': participation.nombre_votant if participation else 0,
                'bulletin_nul': participation.bulletin_nul if participation else 0,
                'suffrage_exprime': (participation.suffrage_exprime or 0) if participation else 0,
                'taux_participation': participation.taux_participation if participation else None,
                'voix': voix.get(bureau.code, {}),
            })
        return lignes

    # ========== AGRÉGATION ==========

    def agreger(self, lignes, partis=None):
        """Totaux de participation et classement des partis sur un ensemble de lignes"""
        if partis is None:
            partis = self.libelles_partis()

        totaux = {
            'nombre_bureaux': len(lignes),
            'bureaux_saisis': sum(1 for ligne in lignes if ligne['saisi']),
            'bureaux_incoherents': sum(1 for ligne in lignes if ligne['has_incoherence']),
        }
        for champ in ('nombre_inscrit', 'nombre_votant', 'bulletin_nul', 'suffrage_exprime'):
            totaux[champ] = sum(ligne[champ] for ligne in lignes)
        totaux['taux_participation'] = taux_participation(
            totaux['nombre_votant'], totaux['nombre_inscrit']
        )

        voix = Counter()
        for ligne in lignes:
            voix.update(ligne['voix'])
        total_voix = sum(voix.values())
        totaux['total_voix'] = total_voix

        resultats = [
            {
                'parti': int(parti_id),
                'designation': partis.get(int(parti_id), ''),
                'voix': nombre,
                'pourcentage': pourcentage(nombre, total_voix),
            }
            for parti_id, nombre in voix.items()
        ]
        resultats.sort(key=lambda r: r['voix'], reverse=True)

        return {'totaux': totaux, 'resultats': resultats}

    def grouper(self, lignes, niveau, partis):
        groupes = OrderedDict()
        for ligne in lignes:
            territoire = ligne[niveau]
            groupes.setdefault(territoire['code'], (territoire, []))[1].append(ligne)

        return [
            {**territoire, **self.agreger(lignes_groupe, partis)}
            for territoire, lignes_groupe in groupes.values()
        ]

    def libelles_partis(self):
        return dict(PartiPolitique.objects.values_list('id', 'designation'))

    def synthese(self, bureaux, sous_niveau=None, detail_bureaux=False):
        partis = self.libelles_partis()
        lignes = self.lignes_bureaux(bureaux)

        donnees = self.agreger(lignes, partis)
        if sous_niveau:
            donnees[f"{sous_niveau}s"] = self.grouper(lignes, sous_niveau, partis)
        if detail_bureaux:
            donnees['bureaux'] = lignes
        donnees['generated_at'] = timezone.now().isoformat()
        return donnees

    # ========== SYNTHÈSES TERRITORIALES ==========

    def get_synthese_arrondissement(self, arrondissement, force_refresh=False):
        def calcul():
            donnees = self.synthese(
                BureauVote.objects.par_arrondissement(arrondissement), detail_bureaux=True
            )
            donnees['territoire'] = {'niveau': 'arrondissement', 'code': arrondissement.code,
                                     'libelle': arrondissement.libelle}
            return donnees

        return self._en_cache(self.cle('arrondissement', arrondissement.code), calcul, force_refresh)

    def get_synthese_departement(self, departement, force_refresh=False):
        def calcul():
            donnees = self.synthese(
                BureauVote.objects.par_departement(departement), sous_niveau='arrondissement'
            )
            donnees['territoire'] = {'niveau': 'departement', 'code': departement.code,
                                     'libelle': departement.libelle}
            return donnees

        return self._en_cache(self.cle('departement', departement.code), calcul, force_refresh)

    def get_synthese_region(self, region, force_refresh=False):
        def calcul():
            donnees = self.synthese(
                BureauVote.objects.par_region(region), sous_niveau='departement'
            )
            donnees['territoire'] = {'niveau': 'region', 'code': region.code,
                                     'libelle': region.libelle}
            return donnees

        return self._en_cache(self.cle('region', region.code), calcul, force_refresh)

    def get_synthese_nationale(self, force_refresh=False):
        def calcul():
            donnees = self.synthese(BureauVote.objects.all(), sous_niveau='region')
            donnees['territoire'] = {'niveau': 'national'}
            return donnees

        return self._en_cache(self.cle('national'), calcul, force_refresh)

    def get_synthese_utilisateur(self, user):
        """Synthèse restreinte au territoire accessible (non mise en cache)"""
        if user.a_acces_complet():
            return self.get_synthese_nationale()

        donnees = self.synthese(user.get_bureaux_vote_accessibles(), sous_niveau='departement')
        donnees['territoire'] = {'niveau': 'perimetre_utilisateur'}
        return donnees

    # ========== RÉSULTATS NATIONAUX ==========

    def resultats_nationaux(self, queryset=None, statut=None, details=False):
        """Voix par parti cumulées sur les résultats départementaux"""
        if queryset is None:
            queryset = ResultatDepartement.objects.all()
        if statut:
            queryset = queryset.filter(statut=statut)

        groupes = queryset.order_by().values('parti').annotate(
            total_votes=Sum('nombre_vote'),
            nombre_departements=Count('departement', distinct=True),
        )
        total_votes = sum(g['total_votes'] or 0 for g in groupes)
        partis = PartiPolitique.objects.in_bulk([g['parti'] for g in groupes])

        resultats = []
        for groupe in groupes:
            parti = partis.get(groupe['parti'])
            ligne = {
                'parti': groupe['parti'],
                'designation': parti.designation if parti else '',
                'total_votes': groupe['total_votes'] or 0,
                'pourcentage': pourcentage(groupe['total_votes'] or 0, total_votes),
                'nombre_departements': groupe['nombre_departements'],
            }
            if details and parti is not None:
                ligne['parti_details'] = {
                    'abbreviation': parti.abbreviation,
                    'description': parti.description,
                    'couleur': parti.couleur,
                    'logo': parti.logo,
                }
            resultats.append(ligne)

        resultats.sort(key=lambda r: r['total_votes'], reverse=True)

        return {
            'resultats': resultats,
            'total_votes': total_votes,
            'total_departements': queryset.order_by().values('departement').distinct().count(),
            'metadata': {
                'generated_at': timezone.now().isoformat(),
                'statut': statut,
                'nombre_partis': len(resultats),
            },
        }

    # ========== STATISTIQUES GLOBALES ==========

    def statistiques(self, user):
        """Compteurs et moyennes sur le territoire accessible"""
        departements = user.get_departements_accessibles()
        participations = user.filtrer_par_territoire(
            ParticipationDepartement.objects.all(), departement='departement'
        )
        resultats = user.filtrer_par_territoire(
            ResultatDepartement.objects.all(), departement='departement'
        )

        participation = participations.aggregate(
            nombre=Count('id'),
            taux_moyen=Avg('taux_participation'),
            total_inscrits=Sum('nombre_inscrit'),
            total_votants=Sum('nombre_votant'),
            total_bulletins_nuls=Sum('bulletin_nul'),
            total_suffrages_exprimes=Sum('suffrage_exprime'),
        )
        participation['taux_moyen'] = round(participation['taux_moyen'] or 0, 2)
        for cle in ('total_inscrits', 'total_votants', 'total_bulletins_nuls',
                    'total_suffrages_exprimes'):
            participation[cle] = participation[cle] or 0

        return {
            'entites': {
                'regions': user.get_regions_accessibles().count(),
                'departements': departements.count(),
                'arrondissements': user.get_arrondissements_accessibles().count(),
                'bureaux_vote': user.get_bureaux_vote_accessibles().count(),
                'partis': PartiPolitique.objects.count(),
                'candidats': Candidat.objects.filter(is_active=True).count(),
            },
            'participation': participation,
            'total_votes': resultats.aggregate(total=Sum('nombre_vote'))['total'] or 0,
            'saisies': {
                'participations_incoherentes': participations.filter(has_incoherence=True).count(),
                'par_statut': {
                    ligne['statut']: ligne['n']
                    for ligne in participations.order_by().values('statut').annotate(n=Count('id'))
                },
            },
            'generated_at': timezone.now().isoformat(),
        }

    # ========== RAFRAÎCHISSEMENT ==========

    def rafraichir_tout(self):
        """Recalcule et remet en cache toutes les synthèses territoriales"""
        compteur = 0
        for region in Region.objects.all():
            self.get_synthese_region(region, force_refresh=True)
            compteur += 1
        for departement in Departement.objects.all():
            self.get_synthese_departement(departement, force_refresh=True)
            compteur += 1
        for arrondissement in Arrondissement.objects.all():
            self.get_synthese_arrondissement(arrondissement, force_refresh=True)
            compteur += 1
        self.get_synthese_nationale(force_refresh=True)
        return compteur + 1


# Instance singleton
synthese_service = SyntheseService()
