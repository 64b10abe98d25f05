from enum import Enum
from typing import Dict, List


class InitiativeType(str, Enum):
    RESSOURCERIE = "Ressourcerie"
    RECYCLERIE = "Recyclerie"
    REPAIR_CAFE = "Repair Café"
    ATELIER_VELO = "Atelier vélo"
    POINT_DE_COLLECTE = "Point de collecte"
    COMPOSTEUR_COLLECTIF = "Composteur collectif"
    AMAP = "AMAP"
    JARDIN_PARTAGE = "Jardin partagé"
    GRAINOTHEQUE = "Grainothèque"
    FRIPERIE = "Friperie"
    DONNERIE = "Donnerie"
    EPICERIE_SOCIALE = "Épicerie sociale"
    EPICERIE_VRAC = "Épicerie vrac"
    BIBLIOTHEQUE_OBJETS = "Bibliothèque d'objets"
    SEL = "SEL"
    ACCORDERIE = "Accorderie"
    FAB_LAB = "Fab Lab"
    COOPERATIVE = "Coopérative"
    TIERS_LIEU = "Tiers-lieu"
    AUTRE = "Autre"


T = InitiativeType

# --------------------------------------------------
# Catalogue: (color, marker color, lucide icon)
# --------------------------------------------------

TYPE_STYLE: Dict[InitiativeType, tuple] = {
    T.RESSOURCERIE: ("#10b981", "#94a3b8", "Recycle"),
    T.RECYCLERIE: ("#059669", "#2dd4bf", "RefreshCw"),
    T.REPAIR_CAFE: ("#f59e0b", "#fbbf24", "Wrench"),
    T.ATELIER_VELO: ("#0891b2", "#22d3ee", "Bike"),
    T.POINT_DE_COLLECTE: ("#8b5cf6", "#c084fc", "Trash2"),
    T.COMPOSTEUR_COLLECTIF: ("#65a30d", "#65a30d", "Leaf"),
    T.AMAP: ("#84cc16", "#34d399", "Wheat"),
    T.JARDIN_PARTAGE: ("#22c55e", "#4ade80", "Flower2"),
    T.GRAINOTHEQUE: ("#a3e635", "#a3e635", "Sprout"),
    T.FRIPERIE: ("#ec4899", "#f472b6", "Shirt"),
    T.DONNERIE: ("#f472b6", "#fda4af", "Gift"),
    T.EPICERIE_SOCIALE: ("#dc2626", "#fb7185", "ShoppingCart"),
    T.EPICERIE_VRAC: ("#eab308", "#facc15", "ShoppingBag"),
    T.BIBLIOTHEQUE_OBJETS: ("#6366f1", "#818cf8", "LibraryBig"),
    T.SEL: ("#ca8a04", "#fbbf24", "Handshake"),
    T.ACCORDERIE: ("#06b6d4", "#38bdf8", "Users"),
    T.FAB_LAB: ("#7c3aed", "#a78bfa", "Cpu"),
    T.COOPERATIVE: ("#3b82f6", "#60a5fa", "Building2"),
    T.TIERS_LIEU: ("#9333ea", "#e879f9", "Coffee"),
    T.AUTRE: ("#6b7280", "#9ca3af", "MapPin"),
}

TYPE_DESCRIPTIONS: Dict[InitiativeType, str] = {
    T.RESSOURCERIE: (
        "Lieu de collecte, tri, valorisation et revente d'objets de seconde main. "
        "Favorise le réemploi et évite le gaspillage en donnant une seconde vie aux objets."
    ),
    T.RECYCLERIE: (
        "Centre de recyclage et de valorisation des déchets. Transforme les matériaux "
        "usagés en nouvelles ressources pour l'économie circulaire."
    ),
    T.REPAIR_CAFE: (
        "Atelier participatif où l'on apprend à réparer ses objets (électroménager, "
        "vêtements, vélos...). Lutter contre l'obsolescence programmée et créer du lien social."
    ),
    T.ATELIER_VELO: (
        "Atelier associatif d'auto-réparation de vélos. Apprendre à entretenir et réparer "
        "son vélo, avec outils et conseils de bénévoles. Favorise la mobilité douce."
    ),
    T.POINT_DE_COLLECTE: (
        "Point de collecte pour déchets spécifiques (textiles, piles, électronique, etc.). "
        "Permet un recyclage approprié et évite la pollution."
    ),
    T.COMPOSTEUR_COLLECTIF: (
        "Composteur de quartier où habitants déposent leurs déchets organiques. Produit "
        "du compost gratuit et réduit les ordures ménagères de 30%."
    ),
    T.AMAP: (
        "Association pour le Maintien d'une Agriculture Paysanne. Circuit court entre "
        "producteurs et consommateurs avec engagement réciproque. Produits locaux, de saison et bio."
    ),
    T.JARDIN_PARTAGE: (
        "Espace de jardinage collectif géré par les habitants. Cultiver ses légumes, "
        "apprendre le jardinage écologique et créer du lien social dans le quartier."
    ),
    T.GRAINOTHEQUE: (
        "Lieu d'échange gratuit de graines et de savoir-faire. Préserver la biodiversité "
        "végétale et partager les semences libres entre jardiniers amateurs."
    ),
    T.FRIPERIE: (
        "Magasin de vêtements et accessoires de seconde main. Alternative durable à la "
        "fast-fashion, favorise le réemploi textile et l'économie circulaire."
    ),
    T.DONNERIE: (
        "Lieu de don et de récupération d'objets gratuits. Principe du \"gratuit\" pour "
        "éviter le gaspillage et permettre l'accès à tous aux biens de consommation."
    ),
    T.EPICERIE_SOCIALE: (
        "Magasin solidaire proposant des produits alimentaires à prix réduits. Aide les "
        "personnes en difficulté tout en préservant leur dignité et leur pouvoir d'achat."
    ),
    T.EPICERIE_VRAC: (
        "Épicerie zéro déchet vendant en vrac (sans emballage). Réduire les déchets "
        "plastiques, acheter la quantité souhaitée et privilégier le local et le bio."
    ),
    T.BIBLIOTHEQUE_OBJETS: (
        "Lieu de prêt d'outils et d'objets du quotidien (perceuse, échelle, appareil à "
        "raclette...). Usage plutôt que propriété, économie de partage."
    ),
    T.SEL: (
        "Système d'Échange Local basé sur l'échange de services, savoirs et biens sans "
        "argent. Monnaie locale virtuelle et création de lien social dans le territoire."
    ),
    T.ACCORDERIE: (
        "Réseau d'échange de services et de temps entre membres. Une heure donnée = une "
        "heure reçue, quelle que soit la nature du service. Égalité et solidarité."
    ),
    T.FAB_LAB: (
        "Laboratoire de fabrication numérique ouvert à tous. Machines (imprimante 3D, "
        "découpe laser...), partage de connaissances et prototypage de projets."
    ),
    T.COOPERATIVE: (
        "Entreprise collective où les membres sont propriétaires et décisionnaires. "
        "Gouvernance démocratique, partage des bénéfices et ancrage territorial."
    ),
    T.TIERS_LIEU: (
        "Espace hybride entre domicile et travail. Coworking, fablab, café associatif... "
        "Favorise innovation sociale, collaboration et convivialité."
    ),
    T.AUTRE: (
        "Autre initiative d'économie sociale, solidaire et circulaire ne correspondant "
        "pas aux catégories existantes."
    ),
}


def type_catalogue() -> List[Dict]:
    return [
        {
            "name": t.value,
            "color": TYPE_STYLE[t][0],
            "marker_color": TYPE_STYLE[t][1],
            "icon": TYPE_STYLE[t][2],
            "description": TYPE_DESCRIPTIONS[t],
        }
        for t in InitiativeType
    ]
