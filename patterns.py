"""
patterns.py - Multilingual phrase patterns, one PatternSet per concept.

Each concept keeps its regexes tagged by language (en, de, fr, es, nl,
sometimes it) instead of one flat list, so it's easy to see which
languages a concept covers and to add a new one.  Everything is compiled
case-insensitive at import time.
"""

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class PatternSet:
    """A named concept and its (language, compiled regex) pairs."""

    concept: str
    patterns: tuple

    def search(self, text):
        """Return (language, match) for the first pattern that hits, or None."""
        if not text:
            return None
        for language, regex in self.patterns:
            match = regex.search(text)
            if match:
                return language, match
        return None

    def matches(self, text):
        return self.search(text) is not None

    @property
    def languages(self):
        seen = []
        for language, _ in self.patterns:
            if language not in seen:
                seen.append(language)
        return tuple(seen)


def pattern_set(concept, **by_language):
    """Build a PatternSet from keyword args of language=[raw regexes]."""
    compiled = []
    for language, raw_patterns in by_language.items():
        for raw in raw_patterns:
            compiled.append((language, re.compile(raw, re.IGNORECASE)))
    return PatternSet(concept, tuple(compiled))


# ────────────────────────────────────────────────────────────────────
# POLICY LINKS
# ────────────────────────────────────────────────────────────────────

PRIVACY_POLICY_TEXT = pattern_set(
    "privacy policy link text",
    en=[r"privacy\s*policy", r"privacy\s*notice", r"privacy\s*statement"],
    de=[r"datenschutz"],
    fr=[r"politique\s*de\s*confidentialit"],
    es=[r"pol[ií]tica\s*de\s*privacidad"],
    nl=[r"privacybeleid", r"privacyverklaring"],
    it=[r"informativa\s*(sulla\s*)?privacy"],
)

PRIVACY_POLICY_HREF = pattern_set(
    "privacy policy link href",
    en=[r"privacy"],
    de=[r"datenschutz"],
    fr=[r"confidentialit"],
    es=[r"privacidad"],
    nl=[r"privacybeleid"],
)

TERMS_OF_SERVICE = pattern_set(
    "terms of service link",
    en=[r"terms\s*(of\s*)?(service|use|conditions)", r"conditions\s*(of\s*)?use"],
    de=[r"nutzungsbedingungen", r"\bagb\b"],
    fr=[r"conditions\s*g[ée]n[ée]rales"],
    es=[r"t[ée]rminos\s*(y\s*)?condiciones"],
    nl=[r"algemene\s*voorwaarden", r"gebruiksvoorwaarden"],
)

COOKIE_POLICY = pattern_set(
    "cookie policy link",
    en=[r"cookie\s*policy", r"cookie\s*notice"],
    de=[r"cookie\s*-?richtlinie"],
    fr=[r"politique\s*(des\s*|de\s*)?cookies"],
    es=[r"pol[ií]tica\s*de\s*cookies"],
    nl=[r"cookiebeleid", r"cookieverklaring"],
)


# ────────────────────────────────────────────────────────────────────
# POLICY CONTENT (GDPR Articles 13-14)
# ────────────────────────────────────────────────────────────────────

CONTROLLER_IDENTITY = pattern_set(
    "controller identity",
    en=[r"controller", r"company\s*name", r"contact\s*information", r"registered\s*office"],
    de=[r"verantwortliche", r"verantwortlicher"],
    fr=[r"responsable\s*du\s*traitement"],
    es=[r"responsable\s*del\s*tratamiento"],
    nl=[r"verwerkingsverantwoordelijke"],
)

DPO_CONTACT = pattern_set(
    "DPO contact",
    en=[r"data\s*protection\s*officer", r"\bdpo\b", r"privacy\s*officer", r"privacy@"],
    de=[r"datenschutzbeauftragte"],
    fr=[r"d[ée]l[ée]gu[ée]\s*[àa]\s*la\s*protection\s*des\s*donn[ée]es"],
    es=[r"delegado\s*de\s*protecci[óo]n\s*de\s*datos"],
    nl=[r"functionaris\s*voor\s*gegevensbescherming"],
)

PROCESSING_PURPOSES = pattern_set(
    "processing purposes",
    en=[r"purpose", r"why\s*we\s*collect", r"how\s*we\s*use"],
    de=[r"zweck"],
    fr=[r"finalit[ée]"],
    es=[r"finalidad"],
    nl=[r"doeleinden", r"\bdoel\b"],
)

LEGAL_BASIS = pattern_set(
    "legal basis",
    en=[r"legal\s*basis", r"lawful\s*basis", r"consent", r"legitimate\s*interest",
        r"contractual\s*necessity", r"legal\s*obligation", r"article\s*6"],
    de=[r"rechtsgrundlage", r"berechtigte[ns]?\s*interesse", r"einwilligung"],
    fr=[r"base\s*l[ée]gale", r"int[ée]r[êe]t\s*l[ée]gitime"],
    es=[r"base\s*(legal|jur[ií]dica)", r"inter[ée]s\s*leg[ií]timo"],
    nl=[r"rechtsgrond", r"gerechtvaardigd\s*belang"],
)

DATA_CATEGORIES = pattern_set(
    "data categories",
    en=[r"personal\s*data", r"information\s*we\s*collect", r"data\s*categories", r"types\s*of\s*data"],
    de=[r"personenbezogene\s*daten"],
    fr=[r"donn[ée]es\s*personnelles", r"donn[ée]es\s*[àa]\s*caract[èe]re\s*personnel"],
    es=[r"datos\s*personales"],
    nl=[r"persoonsgegevens"],
)

RETENTION_PERIODS = pattern_set(
    "retention periods",
    en=[r"retention", r"how\s*long", r"storage\s*period", r"keep\s*your\s*data", r"delete.*data"],
    de=[r"speicherdauer", r"aufbewahrung"],
    fr=[r"dur[ée]e\s*de\s*conservation"],
    es=[r"plazo\s*de\s*conservaci[óo]n", r"conservaci[óo]n\s*de\s*(los\s*)?datos"],
    nl=[r"bewaartermijn"],
)

DATA_RECIPIENTS = pattern_set(
    "data recipients",
    en=[r"third.*part", r"recipient", r"share.*with", r"disclose.*to", r"service\s*provider"],
    de=[r"empf[äa]nger", r"dritte"],
    fr=[r"destinataire", r"tiers"],
    es=[r"destinatario", r"terceros"],
    nl=[r"ontvanger", r"derden"],
)

INTERNATIONAL_TRANSFERS = pattern_set(
    "international transfers",
    en=[r"international\s*transfer", r"outside.*\beea\b", r"outside.*\beu\b", r"cross.*border",
        r"adequacy\s*decision", r"standard\s*contractual\s*clauses", r"\bscc\b"],
    de=[r"drittl[äa]nd", r"standardvertragsklauseln"],
    fr=[r"transfert.*hors\s*de\s*l'ue", r"clauses\s*contractuelles\s*types"],
    es=[r"transferencias?\s*internacional", r"cl[áa]usulas\s*contractuales\s*tipo"],
    nl=[r"doorgifte.*buiten", r"modelcontractbepalingen"],
)

USER_RIGHTS_DISCLOSURE = pattern_set(
    "data subject rights",
    en=[r"your\s*rights", r"data\s*subject\s*rights", r"right\s*to\s*access", r"right\s*to\s*erasure",
        r"right\s*to\s*rectification", r"right\s*to\s*portability"],
    de=[r"ihre\s*rechte", r"betroffenenrechte", r"recht\s*auf\s*auskunft"],
    fr=[r"vos\s*droits", r"droit\s*d'acc[èe]s"],
    es=[r"sus\s*derechos", r"derecho\s*de\s*acceso"],
    nl=[r"uw\s*rechten", r"recht\s*op\s*inzage"],
)

COMPLAINT_RIGHT = pattern_set(
    "complaint right",
    en=[r"supervisory\s*authority", r"lodge.*complaint", r"data\s*protection\s*authority",
        r"right\s*to\s*complain"],
    de=[r"aufsichtsbeh[öo]rde", r"beschwerde"],
    fr=[r"\bcnil\b", r"r[ée]clamation"],
    es=[r"autoridad\s*de\s*control", r"reclamaci[óo]n"],
    nl=[r"autoriteit\s*persoonsgegevens", r"klacht"],
)

DATA_SOURCE = pattern_set(
    "data source",
    en=[r"source.*data", r"where.*obtain", r"collect.*from"],
    de=[r"herkunft\s*der\s*daten", r"quelle"],
    fr=[r"source\s*des\s*donn[ée]es"],
    es=[r"origen\s*de\s*los\s*datos"],
    nl=[r"bron\s*van\s*de\s*gegevens"],
)

AUTOMATED_DECISIONS_DISCLOSURE = pattern_set(
    "automated decisions",
    en=[r"automated\s*decision", r"profiling", r"algorithmic", r"automated\s*processing"],
    de=[r"automatisierte\s*entscheidung", r"profiling"],
    fr=[r"d[ée]cision\s*automatis[ée]e", r"profilage"],
    es=[r"decisiones\s*automatizadas", r"elaboraci[óo]n\s*de\s*perfiles"],
    nl=[r"geautomatiseerde\s*besluitvorming", r"profilering"],
)


# ────────────────────────────────────────────────────────────────────
# CONSENT BANNER
# ────────────────────────────────────────────────────────────────────

BANNER_TEXT = pattern_set(
    "cookie banner text",
    en=[r"we\s*use\s*cookies", r"this\s*(website|site)\s*uses?\s*cookies",
        r"cookie\s*(consent|preferences|settings)", r"accept\s*(all\s*)?cookies",
        r"reject\s*(all\s*)?cookies", r"manage\s*(cookie\s*)?preferences", r"customi[sz]e\s*cookies",
        r"cookie\s*policy", r"privacy\s*preferences", r"gdpr\s*consent", r"your\s*privacy"],
    de=[r"wir\s*verwenden\s*cookies", r"diese\s*website\s*verwendet\s*cookies"],
    fr=[r"nous\s*utilisons\s*des\s*cookies", r"ce\s*site\s*utilise\s*des\s*cookies"],
    es=[r"utilizamos\s*cookies", r"usamos\s*cookies"],
    nl=[r"wij\s*gebruiken\s*cookies", r"deze\s*website\s*gebruikt\s*cookies"],
)

ACCEPT_BUTTON = pattern_set(
    "accept control",
    en=[r"accept", r"agree", r"allow", r"\bok\b", r"got\s*it", r"understood"],
    de=[r"akzeptieren", r"zustimmen", r"einverstanden", r"alle\s*erlauben"],
    fr=[r"accepter", r"j'accepte"],
    es=[r"aceptar", r"acepto"],
    nl=[r"accepteren", r"akkoord"],
)

REJECT_BUTTON = pattern_set(
    "reject control",
    en=[r"reject", r"decline", r"deny", r"refuse", r"no\s*thanks", r"dismiss"],
    de=[r"ablehnen", r"verweigern"],
    fr=[r"refuser", r"continuer\s*sans\s*accepter"],
    es=[r"rechazar"],
    nl=[r"weigeren", r"afwijzen"],
)

CONSENT_CATEGORY = pattern_set(
    "consent category label",
    en=[r"necessary", r"functional", r"analytics", r"marketing", r"advertising",
        r"preferences", r"statistics"],
    de=[r"notwendig", r"funktional", r"statistik", r"marketing"],
    fr=[r"n[ée]cessaires", r"fonctionnels", r"statistiques", r"publicit"],
    es=[r"necesarias", r"funcionales", r"anal[ií]tica", r"publicidad"],
    nl=[r"noodzakelijk", r"functioneel", r"statistieken"],
)

# Checkbox labels that may legitimately be pre-ticked.
ESSENTIAL_CATEGORY = pattern_set(
    "essential category label",
    en=[r"necessary", r"essential"],
    de=[r"notwendig", r"erforderlich"],
    fr=[r"n[ée]cessaire", r"essentiel"],
    es=[r"necesari", r"esencial"],
    nl=[r"noodzakelijk"],
)

CONSENT_CLARITY = pattern_set(
    "consent vocabulary",
    en=[r"cookie", r"consent", r"privacy", r"data", r"personal\s*information"],
    de=[r"einwilligung", r"datenschutz", r"daten"],
    fr=[r"consentement", r"donn[ée]es"],
    es=[r"consentimiento", r"datos"],
    nl=[r"toestemming", r"gegevens"],
)

WITHDRAW_CONSENT = pattern_set(
    "withdraw consent",
    en=[r"withdraw", r"change.*preference", r"manage.*cookie", r"cookie.*setting", r"privacy.*setting"],
    de=[r"widerruf", r"cookie-?einstellungen"],
    fr=[r"retirer\s*(votre|mon)\s*consentement", r"param[èe]tres\s*des\s*cookies", r"g[ée]rer\s*les\s*cookies"],
    es=[r"retirar\s*(su|el)\s*consentimiento", r"configuraci[óo]n\s*de\s*cookies"],
    nl=[r"toestemming\s*intrekken", r"cookie-?instellingen"],
)

# Wording on ordinary buttons that still counts as a rejection for the
# banner-compliance sub-check.
REJECT_OPTION = pattern_set(
    "reject option",
    en=[r"reject", r"deny", r"decline", r"refuse"],
    de=[r"ablehnen"],
    fr=[r"refuser"],
    es=[r"rechazar"],
    nl=[r"weigeren"],
)

GRANULAR_CONTROLS = pattern_set(
    "granular controls",
    en=[r"preferences", r"settings", r"customi[sz]e", r"manage"],
    de=[r"einstellungen", r"anpassen"],
    fr=[r"pr[ée]f[ée]rences", r"personnaliser", r"param[èe]tres"],
    es=[r"preferencias", r"personalizar", r"configurar"],
    nl=[r"voorkeuren", r"instellingen", r"aanpassen"],
)


# ────────────────────────────────────────────────────────────────────
# USER RIGHTS (GDPR Articles 15-20)
# ────────────────────────────────────────────────────────────────────

PROFILE_SETTINGS = pattern_set(
    "profile / account settings",
    en=[r"profile", r"account", r"settings", r"my-account", r"user-settings", r"edit-profile",
        r"personal-info", r"update-profile"],
    de=[r"profil", r"konto", r"einstellungen", r"mein-konto", r"benutzerkonto",
        r"profil.*bearbeiten", r"pers[öo]nliche.*daten"],
    fr=[r"compte", r"param[èe]tres", r"mon-compte", r"modifier.*profil", r"informations.*personnelles"],
    es=[r"perfil", r"cuenta", r"configuraci[óo]n", r"mi-cuenta", r"ajustes", r"informaci[óo]n.*personal"],
    nl=[r"profiel", r"instellingen", r"mijn-account", r"persoonlijke.*gegevens"],
)

DATA_EXPORT = pattern_set(
    "data export",
    en=[r"export.*data", r"download.*data", r"data.*portability", r"download.*information",
        r"export.*account", r"request.*data", r"get.*my.*data"],
    de=[r"daten.*exportieren", r"daten.*herunterladen", r"daten[üu]bertragbarkeit",
        r"daten.*anfordern", r"meine.*daten.*laden"],
    fr=[r"exporter.*donn[ée]es", r"t[ée]l[ée]charger.*donn[ée]es", r"portabilit[ée].*donn[ée]es",
        r"demander.*donn[ée]es", r"obtenir.*mes.*donn[ée]es"],
    es=[r"exportar.*datos", r"descargar.*datos", r"portabilidad.*datos", r"solicitar.*datos",
        r"obtener.*mis.*datos"],
    nl=[r"gegevens.*exporteren", r"gegevens.*downloaden", r"gegevensoverdraagbaarheid",
        r"gegevens.*aanvragen", r"mijn.*gegevens.*ophalen"],
)

ACCOUNT_DELETION = pattern_set(
    "account deletion",
    en=[r"delete.*account", r"close.*account", r"remove.*account", r"deactivate.*account",
        r"cancel.*account", r"erase.*data", r"right.*to.*erasure", r"right.*to.*be.*forgotten"],
    de=[r"konto.*l[öo]schen", r"konto.*schlie[ßs]en", r"konto.*entfernen", r"konto.*deaktivieren",
        r"daten.*l[öo]schen", r"recht.*auf.*l[öo]schung", r"recht.*auf.*vergessenwerden"],
    fr=[r"supprimer.*compte", r"fermer.*compte", r"effacer.*compte", r"d[ée]sactiver.*compte",
        r"effacer.*donn[ée]es", r"droit.*[àa].*l'effacement", r"droit.*[àa].*l'oubli"],
    es=[r"eliminar.*cuenta", r"cerrar.*cuenta", r"borrar.*cuenta", r"desactivar.*cuenta",
        r"borrar.*datos", r"derecho.*al.*olvido", r"derecho.*de.*supresi[óo]n"],
    nl=[r"account.*verwijderen", r"account.*sluiten", r"account.*wissen", r"account.*deactiveren",
        r"gegevens.*wissen", r"recht.*op.*vergetelheid", r"recht.*op.*gegevenswissing"],
)

DSAR = pattern_set(
    "data subject access request",
    en=[r"\bdsar\b", r"data.*subject.*request", r"privacy.*request", r"data.*request",
        r"gdpr.*request", r"submit.*request", r"access.*request", r"data.*protection"],
    de=[r"auskunftsersuchen", r"datenschutzanfrage", r"betroffenenanfrage", r"dsgvo.*anfrage",
        r"anfrage.*einreichen", r"datenschutz"],
    fr=[r"demande.*d'acc[èe]s", r"demande.*de.*confidentialit[ée]", r"demande.*rgpd",
        r"soumettre.*demande", r"protection.*des.*donn[ée]es"],
    es=[r"solicitud.*de.*acceso", r"solicitud.*de.*privacidad", r"solicitud.*rgpd",
        r"enviar.*solicitud", r"protecci[óo]n.*de.*datos"],
    nl=[r"verzoek.*inzage", r"privacyverzoek", r"gegevensverzoek", r"avg.*verzoek",
        r"verzoek.*indienen", r"gegevensbescherming"],
)

AUTHENTICATION = pattern_set(
    "login / signup",
    en=[r"log\s*-?in", r"sign\s*-?in", r"sign\s*-?up", r"register", r"create\s*(an\s*)?account",
        r"log\s*-?out", r"sign\s*-?out"],
    de=[r"anmelden", r"einloggen", r"registrieren", r"abmelden"],
    fr=[r"connexion", r"se\s*connecter", r"s'inscrire", r"inscription", r"cr[ée]er\s*un\s*compte"],
    es=[r"iniciar\s*sesi[óo]n", r"registrarse", r"reg[ií]strate", r"crear\s*cuenta"],
    nl=[r"inloggen", r"aanmelden", r"registreren", r"uitloggen"],
)


# ────────────────────────────────────────────────────────────────────
# ADDITIONAL COMPLIANCE (GDPR Articles 6, 8, 9, 22)
# ────────────────────────────────────────────────────────────────────

AGE_VERIFICATION = pattern_set(
    "age verification",
    en=[r"age\s*verification", r"verify.*age", r"confirm.*age", r"18\+", r"over\s*18", r"13\+",
        r"minimum\s*age", r"date\s*of\s*birth", r"\bdob\b", r"birthday"],
    de=[r"altersverifikation", r"altersbest[äa]tigung", r"geburtsdatum", r"mindestalter"],
    fr=[r"v[ée]rification\s*de\s*l'[âa]ge", r"date\s*de\s*naissance", r"[âa]ge\s*minimum"],
    es=[r"verificaci[óo]n\s*de\s*edad", r"fecha\s*de\s*nacimiento", r"edad\s*m[ií]nima"],
    nl=[r"leeftijdsverificatie", r"geboortedatum", r"minimumleeftijd"],
)

PARENTAL_CONSENT = pattern_set(
    "parental consent",
    en=[r"parental\s*consent", r"parent.*permission", r"guardian.*consent", r"parent.*approval"],
    de=[r"einwilligung\s*der\s*eltern", r"erziehungsberechtigte"],
    fr=[r"consentement\s*parental", r"autorisation\s*parentale"],
    es=[r"consentimiento\s*(de\s*los\s*padres|parental)"],
    nl=[r"ouderlijke\s*toestemming", r"toestemming\s*van\s*(een\s*)?ouder"],
)

# Article 9 special categories.  Keys are the names reported in findings.
SENSITIVE_DATA_CATEGORIES = {
    "health": pattern_set(
        "health data",
        en=[r"health\s*data", r"medical", r"fitness", r"wellness", r"disease"],
        de=[r"gesundheitsdaten"],
        fr=[r"donn[ée]es\s*de\s*sant[ée]"],
        es=[r"datos\s*de\s*salud"],
        nl=[r"gezondheidsgegevens"],
    ),
    "biometric": pattern_set(
        "biometric data",
        en=[r"biometric", r"fingerprint", r"facial\s*recognition", r"face\s*id"],
        de=[r"biometrisch"],
        fr=[r"biom[ée]trique"],
        es=[r"biom[ée]tric"],
        nl=[r"biometrisch"],
    ),
    "genetic": pattern_set(
        "genetic data",
        en=[r"genetic", r"\bdna\b", r"genomic"],
        de=[r"genetisch"],
        fr=[r"g[ée]n[ée]tique"],
        es=[r"gen[ée]tic"],
        nl=[r"genetisch"],
    ),
    "racial": pattern_set(
        "racial or ethnic origin",
        en=[r"\brace\b", r"ethnicity", r"ethnic\s*origin"],
        de=[r"ethnische\s*herkunft"],
        fr=[r"origine\s*(raciale|ethnique)"],
        es=[r"origen\s*(racial|[ée]tnico)"],
        nl=[r"etnische\s*afkomst"],
    ),
    "political": pattern_set(
        "political opinions",
        en=[r"political\s*opinion", r"political\s*view"],
        de=[r"politische\s*meinung"],
        fr=[r"opinions?\s*politique"],
        es=[r"opiniones\s*pol[ií]ticas"],
        nl=[r"politieke\s*opvatting"],
    ),
    "religious": pattern_set(
        "religious beliefs",
        en=[r"religious\s*belief", r"religion", r"\bfaith\b"],
        de=[r"religi[öo]se\s*[üu]berzeugung"],
        fr=[r"convictions?\s*religieuse"],
        es=[r"creencias\s*religiosas"],
        nl=[r"religieuze\s*overtuiging"],
    ),
    "philosophical": pattern_set(
        "philosophical beliefs",
        en=[r"philosophical\s*belief"],
        de=[r"weltanschauliche"],
        fr=[r"convictions?\s*philosophique"],
        es=[r"convicciones\s*filos[óo]ficas"],
        nl=[r"levensbeschouwelijke"],
    ),
    "union": pattern_set(
        "trade union membership",
        en=[r"trade\s*union", r"union\s*membership"],
        de=[r"gewerkschaftszugeh[öo]rigkeit"],
        fr=[r"appartenance\s*syndicale"],
        es=[r"afiliaci[óo]n\s*sindical"],
        nl=[r"lidmaatschap\s*van\s*een\s*vakbond"],
    ),
    "sexual": pattern_set(
        "sexual orientation",
        en=[r"sexual\s*orientation", r"gender\s*identity"],
        de=[r"sexuelle\s*orientierung"],
        fr=[r"orientation\s*sexuelle"],
        es=[r"orientaci[óo]n\s*sexual"],
        nl=[r"seksuele\s*geaardheid"],
    ),
}

EXPLICIT_CONSENT = pattern_set(
    "explicit consent",
    en=[r"explicit\s*consent", r"special\s*category", r"sensitive\s*data", r"sensitive\s*personal"],
    de=[r"ausdr[üu]ckliche\s*einwilligung", r"besondere\s*kategorien"],
    fr=[r"consentement\s*explicite", r"cat[ée]gories\s*particuli[èe]res"],
    es=[r"consentimiento\s*expl[ií]cito", r"categor[ií]as\s*especiales"],
    nl=[r"uitdrukkelijke\s*toestemming", r"bijzondere\s*categorie[ëe]n"],
)

AUTOMATION = pattern_set(
    "automated decision-making",
    en=[r"automated\s*decision", r"algorithmic\s*decision", r"profiling", r"machine\s*learning",
        r"\bai\s*decision", r"artificial\s*intelligence", r"credit\s*scoring", r"risk\s*assessment",
        r"recommendation\s*engine", r"personali[sz]ation", r"automated\s*processing"],
    de=[r"automatisierte\s*entscheidung", r"k[üu]nstliche\s*intelligenz"],
    fr=[r"d[ée]cision\s*automatis[ée]e", r"profilage", r"intelligence\s*artificielle"],
    es=[r"decisiones\s*automatizadas", r"elaboraci[óo]n\s*de\s*perfiles", r"inteligencia\s*artificial"],
    nl=[r"geautomatiseerde\s*besluitvorming", r"profilering", r"kunstmatige\s*intelligentie"],
)

AUTOMATION_DISCLOSURE = pattern_set(
    "automation disclosure",
    en=[r"automated\s*decision.*article\s*22", r"right.*not.*subject.*automated", r"solely.*automated",
        r"human\s*review", r"human\s*intervention"],
    de=[r"ausschlie[ßs]lich\s*auf\s*einer\s*automatisierten", r"menschliches\s*eingreifen"],
    fr=[r"exclusivement\s*sur\s*un\s*traitement\s*automatis[ée]", r"intervention\s*humaine"],
    es=[r"[úu]nicamente\s*en\s*el\s*tratamiento\s*automatizado", r"intervenci[óo]n\s*humana"],
    nl=[r"uitsluitend\s*op\s*geautomatiseerde", r"menselijke\s*tussenkomst"],
)

LEGAL_BASIS_STATEMENT = pattern_set(
    "legal basis statement",
    en=[r"legal\s*basis", r"lawful\s*basis", r"article\s*6", r"legitimate\s*interest",
        r"contractual\s*necessity", r"legal\s*obligation", r"vital\s*interest", r"public\s*task"],
    de=[r"rechtsgrundlage", r"art\.?\s*6\s*dsgvo", r"berechtigte[ns]?\s*interesse"],
    fr=[r"base\s*l[ée]gale", r"int[ée]r[êe]t\s*l[ée]gitime"],
    es=[r"base\s*(legal|jur[ií]dica)", r"inter[ée]s\s*leg[ií]timo"],
    nl=[r"rechtsgrond", r"gerechtvaardigd\s*belang"],
)
