from typing import Dict

from . import config

# =========================
# i18n text snippets
# =========================
I18N: Dict[str, Dict[str, str]] = {
    "en": {
        "title": "LeafDoctor",
        "scan": "Scan",
        "history": "History",
        "weather": "Weather",
        "more": "More",
        "capture": "Take Photo",
        "upload": "Upload from Gallery",
        "analyzing": "Analyzing leaf...",
        "confidence": "Confidence",
        "severityLevel": "Severity",
        "high": "High",
        "medium": "Medium",
        "low": "Low",
        "readAloud": "Read Aloud",
        "organic": "Organic",
        "chemical": "Chemical",
        "prevention": "Prevention",
        "noHistory": "No scans yet",
        "forecast": "Today's Forecast",
        "partlyCloudy": "Partly cloudy",
        "weatherAlert": "Weather Alert",
        "weatherAlertText": "High humidity expected. Watch for fungal infections.",
        "humidity": "Humidity",
        "windSpeed": "Wind Speed",
        "shopsNearby": "Agri Shops Nearby",
        "fertRecommendations": "Fertilizer Tips",
        "chatExpert": "Talk to an Expert",
        "didYouKnow": "Did you know?",
        "didYouKnowText": "Rotating crops every season breaks the life cycle of many soil-borne diseases.",
        "scanFailed": "Could not analyze image. Please try again.",
        "insightsFailed": "Could not load recommendations. Please try again.",
    },
    "hi": {
        "title": "लीफडॉक्टर",
        "scan": "स्कैन",
        "history": "इतिहास",
        "weather": "मौसम",
        "more": "अधिक",
        "capture": "फोटो लें",
        "upload": "गैलरी से अपलोड करें",
        "analyzing": "पत्ती की जांच हो रही है...",
        "confidence": "विश्वास",
        "severityLevel": "गंभीरता",
        "high": "उच्च",
        "medium": "मध्यम",
        "low": "कम",
        "readAloud": "पढ़कर सुनाएं",
        "organic": "जैविक",
        "chemical": "रासायनिक",
        "prevention": "रोकथाम",
        "noHistory": "अभी तक कोई स्कैन नहीं",
        "forecast": "आज का पूर्वानुमान",
        "partlyCloudy": "आंशिक रूप से बादल",
        "weatherAlert": "मौसम चेतावनी",
        "weatherAlertText": "अधिक नमी की संभावना। फफूंद संक्रमण पर नज़र रखें।",
        "humidity": "नमी",
        "windSpeed": "हवा की गति",
        "shopsNearby": "पास की कृषि दुकानें",
        "fertRecommendations": "उर्वरक सुझाव",
        "chatExpert": "विशेषज्ञ से बात करें",
        "didYouKnow": "क्या आप जानते हैं?",
        "didYouKnowText": "हर मौसम फसल बदलने से मिट्टी से होने वाले कई रोगों का चक्र टूट जाता है।",
        "scanFailed": "छवि का विश्लेषण नहीं हो सका। कृपया पुनः प्रयास करें।",
        "insightsFailed": "सुझाव लोड नहीं हो सके। कृपया पुनः प्रयास करें।",
    },
    "mr": {
        "title": "लीफडॉक्टर",
        "scan": "स्कॅन",
        "history": "इतिहास",
        "weather": "हवामान",
        "more": "अधिक",
        "capture": "फोटो घ्या",
        "upload": "गॅलरीतून अपलोड करा",
        "analyzing": "पानाची तपासणी सुरू आहे...",
        "confidence": "विश्वास",
        "severityLevel": "तीव्रता",
        "high": "जास्त",
        "medium": "मध्यम",
        "low": "कमी",
        "readAloud": "मोठ्याने वाचा",
        "organic": "सेंद्रिय",
        "chemical": "रासायनिक",
        "prevention": "प्रतिबंध",
        "noHistory": "अद्याप कोणतेही स्कॅन नाही",
        "forecast": "आजचा अंदाज",
        "partlyCloudy": "अंशतः ढगाळ",
        "weatherAlert": "हवामान इशारा",
        "weatherAlertText": "जास्त आर्द्रतेची शक्यता. बुरशीजन्य रोगांकडे लक्ष द्या.",
        "humidity": "आर्द्रता",
        "windSpeed": "वाऱ्याचा वेग",
        "shopsNearby": "जवळची कृषी दुकाने",
        "fertRecommendations": "खत सूचना",
        "chatExpert": "तज्ज्ञांशी बोला",
        "didYouKnow": "तुम्हाला माहीत आहे का?",
        "didYouKnowText": "दर हंगामात पीक बदलल्याने मातीतून पसरणाऱ्या अनेक रोगांचे चक्र तुटते.",
        "scanFailed": "प्रतिमेचे विश्लेषण होऊ शकले नाही. कृपया पुन्हा प्रयत्न करा.",
        "insightsFailed": "सूचना लोड होऊ शकल्या नाहीत. कृपया पुन्हा प्रयत्न करा.",
    },
}


def t(lang: str, key: str) -> str:
    lang = (lang or config.DEFAULT_LANG).lower().strip()
    if lang not in I18N:
        lang = config.DEFAULT_LANG
    return I18N[lang].get(key, I18N[config.DEFAULT_LANG].get(key, key))


def labels(lang: str) -> Dict[str, str]:
    base = dict(I18N[config.DEFAULT_LANG])
    base.update(I18N.get(lang, {}))
    return base


def severity_label(lang: str, severity: str) -> str:
    """Translated severity, matched case-insensitively; unknown values pass through."""
    key = (severity or "").strip().lower()
    if key in ("high", "medium", "low"):
        return t(lang, key)
    return severity
