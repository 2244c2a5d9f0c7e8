# participation/tests/test_coherence.py
from django.test import SimpleTestCase, override_settings

from participation.services.coherence import (
    ResultatValidation, valider_coherence_resultat, valider_donnees_participation,
    valider_participation_commune, valider_vote
)


def participation(**kwargs):
    data = {
        'nombre_inscrit': 1000,
        'nombre_votant': 600,
        'bulletin_nul': 20,
        'suffrage_exprime': 580,
        'taux_participation': 60.0,
    }
    data.update(kwargs)
    return data


class ValiderDonneesParticipationTestCase(SimpleTestCase):
    """Contrôles d'une saisie de participation"""

    def test_saisie_coherente(self):
        resultat = valider_donnees_participation(participation())

        self.assertTrue(resultat.est_valide)
        self.assertEqual(resultat.avertissements, [])

    def test_valeur_negative(self):
        resultat = valider_donnees_participation(participation(bulletin_nul=-1, suffrage_exprime=601))

        self.assertFalse(resultat.est_valide)
        self.assertTrue(any('négatif' in e for e in resultat.erreurs))

    def test_votants_superieurs_aux_inscrits(self):
        resultat = valider_donnees_participation(
            participation(nombre_votant=1100, suffrage_exprime=1080, taux_participation=None)
        )

        self.assertIn(
            "Le nombre de votants (1100) dépasse le nombre d'inscrits (1000)", resultat.erreurs
        )
        self.assertTrue(any('105%' in a for a in resultat.avertissements))

    def test_votants_sans_inscrits(self):
        resultat = valider_donnees_participation(
            participation(nombre_inscrit=0, taux_participation=None)
        )

        self.assertFalse(resultat.est_valide)
        self.assertIn("Le nombre d'inscrits n'est pas renseigné", resultat.avertissements)

    def test_nuls_superieurs_aux_votants(self):
        resultat = valider_donnees_participation(
            participation(bulletin_nul=700, suffrage_exprime=None)
        )
        self.assertTrue(any('bulletins nuls (700)' in e for e in resultat.erreurs))

    def test_nuls_plus_exprimes_differents_des_votants(self):
        resultat = valider_donnees_participation(participation(suffrage_exprime=500))

        self.assertEqual(len(resultat.erreurs), 1)
        self.assertIn('≠ votants (600)', resultat.erreurs[0])

    def test_exprimes_non_saisis(self):
        resultat = valider_donnees_participation(participation(suffrage_exprime=None))
        self.assertTrue(resultat.est_valide)

    def test_taux_hors_bornes(self):
        resultat = valider_donnees_participation(participation(taux_participation=120))
        self.assertTrue(any('entre 0 et 100' in e for e in resultat.erreurs))

    def test_taux_different_du_calcul(self):
        resultat = valider_donnees_participation(participation(taux_participation=62.5))

        self.assertTrue(resultat.est_valide)
        self.assertTrue(any('taux calculé (60.00%)' in a for a in resultat.avertissements))

    def test_taux_nul_non_compare(self):
        """Un taux saisi à 0 est traité comme non renseigné"""
        resultat = valider_donnees_participation(participation(taux_participation=0))

        self.assertTrue(resultat.est_valide)
        self.assertFalse(any('taux calculé' in a for a in resultat.avertissements))

    @override_settings(ELECTION_COHERENCE={
        'TOLERANCE_TAUX': 5,
        'RATIO_PARTICIPATION_SUSPECT': 1.05,
        'RATIO_BULLETINS_NULS_SUSPECT': 0.10,
        'FACTEUR_VOTE_SUSPECT': 10,
        'SEUIL_TOTAL_VOTES_BUREAU': 10000,
    })
    def test_tolerance_configurable(self):
        resultat = valider_donnees_participation(participation(taux_participation=62.5))
        self.assertEqual(resultat.avertissements, [])

    def test_enveloppes_et_bulletins_irreguliers(self):
        resultat = valider_donnees_participation(participation(
            nombre_enveloppe_urnes=590,
            nombre_enveloppe_vide=400,
            nombre_bulletin_sans_enveloppe=300,
        ))

        self.assertTrue(resultat.est_valide)
        self.assertEqual(len(resultat.avertissements), 2)

    def test_bulletins_nuls_eleves(self):
        resultat = valider_donnees_participation(participation(bulletin_nul=100, suffrage_exprime=500))
        self.assertTrue(any('10%' in a for a in resultat.avertissements))

    def test_votants_manquants(self):
        resultat = valider_donnees_participation({'nombre_inscrit': 1000})
        self.assertIn("Le nombre de votants n'est pas renseigné", resultat.avertissements)


class ValiderResultatTestCase(SimpleTestCase):
    """Contrôles des voix d'un parti dans un bureau"""

    def test_total_egal_aux_exprimes(self):
        resultat = valider_coherence_resultat(300, participation(), autres_votes=[280])

        self.assertTrue(resultat.est_valide)
        self.assertEqual(resultat.avertissements, [])

    def test_total_depasse_les_exprimes(self):
        resultat = valider_coherence_resultat(400, participation(), autres_votes=[280])
        self.assertTrue(any('(680) dépasse' in e for e in resultat.erreurs))

    def test_total_inferieur_aux_exprimes(self):
        resultat = valider_coherence_resultat(300, participation(), autres_votes=[100])

        self.assertTrue(resultat.est_valide)
        self.assertEqual(len(resultat.avertissements), 1)

    def test_exprimes_deduits(self):
        resultat = valider_coherence_resultat(580, participation(suffrage_exprime=None))
        self.assertTrue(resultat.est_valide)

    def test_vote_negatif(self):
        self.assertFalse(valider_vote(-5).est_valide)

    def test_vote_suspect(self):
        resultat = valider_vote(500, autres_votes=[10, 40])

        self.assertTrue(resultat.est_valide)
        self.assertEqual(len(resultat.avertissements), 1)

    def test_total_votes_eleve(self):
        resultat = valider_vote(6000, autres_votes=[5000])
        self.assertTrue(any('anormalement élevé' in a for a in resultat.avertissements))


class ValiderParticipationCommuneTestCase(SimpleTestCase):

    def test_saisie_coherente(self):
        resultat = valider_participation_commune({
            'arrondissement': 10101, 'nombre_bureaux': 2, 'nombre_inscrits': 900,
            'nombre_votants': 600, 'bulletins_nuls': 20, 'suffrages_valables': 580,
        })
        self.assertTrue(resultat.est_valide)

    def test_code_commune_requis(self):
        resultat = valider_participation_commune({'arrondissement': None})
        self.assertIn("Le code commune est requis", resultat.erreurs)

    def test_incoherences(self):
        resultat = valider_participation_commune({
            'arrondissement': 10101, 'nombre_bureaux': -1, 'nombre_inscrits': 500,
            'nombre_votants': 600, 'bulletins_nuls': 50, 'suffrages_valables': 580,
        })
        self.assertEqual(len(resultat.erreurs), 3)


class ResultatValidationTestCase(SimpleTestCase):

    def test_fusionner(self):
        resultat = ResultatValidation(['e1'], ['a1']).fusionner(ResultatValidation([], ['a2']))

        self.assertEqual(resultat.to_dict(), {
            'est_valide': False,
            'erreurs': ['e1'],
            'avertissements': ['a1', 'a2'],
        })
