# Bilingual string table. translate() echoes unknown keys back instead of raising.
TRANSLATIONS = {
    "en": {
        # Header
        "site.title": "Smart Home Savings",
        "site.subtitle": "Your Trusted Canadian Partner for Energy Efficiency",
        "site.tagline": "Save Money, Reduce Your Carbon Footprint",

        # Welcome
        "welcome.title": "Unlock Energy Rebates Across Canada",
        "welcome.description": "Discover thousands in government rebates available for your home. Our assessment connects you with federal, provincial, and local incentives.",
        "welcome.cta": "Start Your Free Assessment",
        "welcome.resume": "Resume Saved Assessment",
        "welcome.trusted": "Trusted by 50,000+ Canadian homeowners",
        "welcome.clear_data": "Clear My Saved Data",
        "welcome.data_cleared": "Your saved assessment data has been removed.",

        # Features
        "features.rebates.title": "Comprehensive Rebate Matching",
        "features.rebates.description": "Access federal, provincial, and municipal rebates worth up to $40,000",
        "features.savings.title": "Personalized Savings Analysis",
        "features.savings.description": "Get detailed cost projections based on your climate zone and home",
        "features.support.title": "100% Canadian Support",
        "features.support.description": "Bilingual support team and certified contractor network",

        # Assessment
        "assessment.title": "Energy Efficiency Assessment",
        "assessment.progress": "Progress",
        "assessment.step": "Step",
        "assessment.of": "of",
        "assessment.next": "Next",
        "assessment.previous": "Previous",
        "assessment.save": "Save & Continue Later",
        "assessment.saved": "Progress saved!",
        "assessment.saved_unencrypted": "Progress saved, but encryption was unavailable on this device.",
        "assessment.save_failed": "We couldn't save your progress. You can still finish the assessment.",
        "assessment.invalid_answer": "Please provide a valid answer to continue.",
        "assessment.select_placeholder": "Select an option...",
        "assessment.contact_step": "Your Details",

        # Questions
        "question.postal.title": "What's your postal code?",
        "question.postal.help": "We use this to find rebates available in your area",
        "question.property.title": "What type of property do you live in?",
        "question.heating.title": "What's your primary heating system?",
        "question.age.title": "When was your home built?",
        "question.insulation.title": "How would you rate your home's insulation?",
        "question.insulation.help": "Think about drafts, cold walls and how hard your heating works in winter",

        # Contact
        "contact.title": "Get Your Personalized Results",
        "contact.subtitle": "Enter your details to receive your rebate analysis and connect with certified professionals",
        "contact.name": "Full Name",
        "contact.email": "Email Address",
        "contact.phone": "Phone Number",
        "contact.privacy": "I consent to receive information about energy efficiency programs",
        "contact.canadian": "Data Stored in Canada",
        "contact.pipeda": "PIPEDA Compliant",
        "contact.submit": "Get My Results",
        "contact.error.name": "Please enter your name.",
        "contact.error.email": "Please enter a valid email address.",
        "contact.error.phone": "Please enter a valid Canadian phone number.",
        "contact.error.consent": "Please give your consent to continue.",

        # Blocked
        "blocked.title": "Too Many Submissions",
        "blocked.description": "We've received several submissions from this device. Please wait 15 minutes before trying again.",

        # Results
        "results.title": "Your Personalized Energy Efficiency Report",
        "results.rebates": "Available Rebates",
        "results.savings": "Annual Savings",
        "results.carbon": "CO₂ Reduction/Year",
        "results.payback": "Payback Period",
        "results.years": "years",
        "results.tonnes": "tonnes",
        "results.breakdown": "Rebate Breakdown by Program Level",
        "results.recommendations": "Recommended Upgrades for Your Home",
        "results.next_steps": "Ready to Get Started?",
        "results.next_steps_description": "A certified energy advisor will contact you within 24 hours to discuss your options and help you access these rebates.",
        "results.download": "Download Full Report",
        "results.reset": "Start New Assessment",

        # Rebate buckets
        "bucket.federal": "Federal",
        "bucket.provincial": "Provincial",
        "bucket.municipal": "Municipal",
        "bucket.utility": "Utility",

        # Trust Signals
        "trust.energystar": "ENERGY STAR Canada Partner",
        "trust.nrcan": "Natural Resources Canada",
        "trust.secure": "Secure & Private",
    },
    "fr": {
        "site.title": "Smart Home Savings",
        "site.subtitle": "Votre Partenaire Canadien de Confiance en Efficacité Énergétique",
        "site.tagline": "Économisez, Réduisez Votre Empreinte Carbone",

        "welcome.title": "Débloquez les Rabais Énergétiques au Canada",
        "welcome.description": "Découvrez des milliers de dollars en rabais gouvernementaux disponibles pour votre maison. Notre évaluation vous connecte aux incitatifs fédéraux, provinciaux et locaux.",
        "welcome.cta": "Commencer Votre Évaluation Gratuite",
        "welcome.resume": "Reprendre l'Évaluation Sauvegardée",
        "welcome.trusted": "Approuvé par plus de 50 000 propriétaires canadiens",
        "welcome.clear_data": "Effacer Mes Données Sauvegardées",
        "welcome.data_cleared": "Vos données d'évaluation sauvegardées ont été supprimées.",

        "features.rebates.title": "Jumelage Complet de Rabais",
        "features.rebates.description": "Accédez aux rabais fédéraux, provinciaux et municipaux valant jusqu'à 40 000 $",
        "features.savings.title": "Analyse Personnalisée des Économies",
        "features.savings.description": "Obtenez des projections de coûts détaillées basées sur votre zone climatique",
        "features.support.title": "Support 100% Canadien",
        "features.support.description": "Équipe de support bilingue et réseau d'entrepreneurs certifiés",

        "assessment.title": "Évaluation de l'Efficacité Énergétique",
        "assessment.progress": "Progrès",
        "assessment.step": "Étape",
        "assessment.of": "de",
        "assessment.next": "Suivant",
        "assessment.previous": "Précédent",
        "assessment.save": "Sauvegarder et Continuer Plus Tard",
        "assessment.saved": "Progrès sauvegardé!",
        "assessment.saved_unencrypted": "Progrès sauvegardé, mais le chiffrement n'était pas disponible sur cet appareil.",
        "assessment.save_failed": "Impossible de sauvegarder votre progrès. Vous pouvez tout de même terminer l'évaluation.",
        "assessment.invalid_answer": "Veuillez fournir une réponse valide pour continuer.",
        "assessment.select_placeholder": "Choisissez une option...",
        "assessment.contact_step": "Vos Coordonnées",

        "question.postal.title": "Quel est votre code postal?",
        "question.postal.help": "Nous utilisons ceci pour trouver les rabais disponibles dans votre région",
        "question.property.title": "Dans quel type de propriété habitez-vous?",
        "question.heating.title": "Quel est votre système de chauffage principal?",
        "question.age.title": "Quand votre maison a-t-elle été construite?",
        "question.insulation.title": "Comment évaluez-vous l'isolation de votre maison?",
        "question.insulation.help": "Pensez aux courants d'air, aux murs froids et à l'effort de votre chauffage en hiver",

        "contact.title": "Obtenez Vos Résultats Personnalisés",
        "contact.subtitle": "Entrez vos détails pour recevoir votre analyse de rabais et vous connecter avec des professionnels certifiés",
        "contact.name": "Nom Complet",
        "contact.email": "Adresse Courriel",
        "contact.phone": "Numéro de Téléphone",
        "contact.privacy": "Je consens à recevoir des informations sur les programmes d'efficacité énergétique",
        "contact.canadian": "Données Stockées au Canada",
        "contact.pipeda": "Conforme PIPEDA",
        "contact.submit": "Obtenir Mes Résultats",
        "contact.error.name": "Veuillez entrer votre nom.",
        "contact.error.email": "Veuillez entrer une adresse courriel valide.",
        "contact.error.phone": "Veuillez entrer un numéro de téléphone canadien valide.",
        "contact.error.consent": "Veuillez donner votre consentement pour continuer.",

        "blocked.title": "Trop de Soumissions",
        "blocked.description": "Nous avons reçu plusieurs soumissions de cet appareil. Veuillez patienter 15 minutes avant de réessayer.",

        "results.title": "Votre Rapport Personnalisé d'Efficacité Énergétique",
        "results.rebates": "Rabais Disponibles",
        "results.savings": "Économies Annuelles",
        "results.carbon": "Réduction de CO₂/An",
        "results.payback": "Période de Récupération",
        "results.years": "ans",
        "results.tonnes": "tonnes",
        "results.breakdown": "Répartition des Rabais par Niveau de Programme",
        "results.recommendations": "Améliorations Recommandées pour Votre Maison",
        "results.next_steps": "Prêt à Commencer?",
        "results.next_steps_description": "Un conseiller en énergie certifié vous contactera dans les 24 heures pour discuter de vos options et vous aider à obtenir ces rabais.",
        "results.download": "Télécharger le Rapport Complet",
        "results.reset": "Nouvelle Évaluation",

        "bucket.federal": "Fédéral",
        "bucket.provincial": "Provincial",
        "bucket.municipal": "Municipal",
        "bucket.utility": "Services Publics",

        "trust.energystar": "Partenaire ENERGY STAR Canada",
        "trust.nrcan": "Ressources Naturelles Canada",
        "trust.secure": "Sécurisé et Privé",
    },
}


def translate(key, language="en"):
    """Looks up `key` in the requested language table; unknown keys (or languages) echo the key."""
    try:
        return TRANSLATIONS.get(language, TRANSLATIONS["en"]).get(key, key)
    except (AttributeError, TypeError):
        return str(key)
