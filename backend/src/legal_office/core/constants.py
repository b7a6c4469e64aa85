"""
Application constants for the Legal Office backend.
"""

# Roles
ROLE_LAWYER = "lawyer"
ROLE_ADMIN = "admin"
ROLES = (ROLE_LAWYER, ROLE_ADMIN)

# Enumerated columns
CLIENT_TYPES = ("individual", "company")
CASE_STATUSES = ("open", "closed", "in_progress")
APPOINTMENT_TYPES = ("court", "meeting", "deadline")
DOCUMENT_STATUSES = ("draft", "final")
INVOICE_STATUSES = ("paid", "unpaid", "overdue")
MESSAGE_SENDERS = ("user", "ai")
AI_MODES = ("glm4", "gemini", "predefined")

# Numbering
CASE_NUMBER_PREFIX = "CASE"
INVOICE_NUMBER_PREFIX = "INV"
NUMBER_ALLOCATION_ATTEMPTS = 8
NUMBER_ALLOCATION_JITTER = 0.05

# Prompts
MAX_PROMPT_LENGTH = 1000

# Model Configuration
GLM_MODELS = {
    "GLM_4": "glm-4",
    "GLM_4_PLUS": "glm-4-plus",
    "GLM_4_0520": "glm-4-0520",
    "GLM_4_AIR": "glm-4-air",
    "GLM_4_AIRX": "glm-4-airx",
    "GLM_4_LONG": "glm-4-long",
    "GLM_4_FLASH": "glm-4-flash",
}
DEFAULT_GLM_MODEL = GLM_MODELS["GLM_4_0520"]
MAX_HISTORY_LENGTH = 10

# Retry Configuration (seconds)
RETRY_MAX_WAIT = 10

# Gemini
GEMINI_TEMPERATURE = 0.4
GEMINI_MAX_OUTPUT_TOKENS = 1000
GEMINI_PREAMBLE = "أجب كخبير قانوني محترف، اجعل الرد مفصلًا ومنطقيًا بناءً على القانون المصري.\nالسؤال: {prompt}"

# Appended to the system prompt on every chat-completions request
ANSWER_QUALITY_CHECKLIST = (
    "\n\nيجب أن تكون إجاباتك:\n"
    "- شاملة ومفصلة\n"
    "- مدعمة بالمراجع القانونية\n"
    "- تغطي جميع جوانب السؤال\n"
    "- تقدم أمثلة عملية عند الحاجة\n"
    "- تشرح المفاهيم القانونية بوضوح"
)

# Joins the admin default prompt with the user's request
DEFAULT_PROMPT_JOINER = "{prompt}\n\nالمطلوب:\n{content}"

LEGAL_TEMPLATES = {
    "DEFENSE_MEMO": """أنت محامي خبير في صياغة المذكرات القانونية. عند كتابة مذكرة دفاع:
- ابدأ بملخص موجز للقضية
- اذكر الوقائع بتسلسل زمني
- اعرض الأسانيد القانونية مع ذكر مواد القانون
- قدم الدفوع الشكلية ثم الموضوعية
- اختم بالطلبات""",

    "LEGAL_ANALYSIS": """أنت مستشار قانوني متخصص في التحليل القانوني. عند تحليل مسألة قانونية:
- حدد القضايا القانونية الرئيسية
- اشرح القوانين والسوابق ذات الصلة
- قيم نقاط القوة والضعف
- قدم توصيات عملية""",

    "CONTRACT_DRAFTING": """أنت خبير في صياغة العقود. عند إعداد عقد:
- تأكد من تحديد أطراف العقد بدقة
- اكتب البنود بلغة واضحة وقانونية
- غطِ جميع الجوانب الأساسية (المدة، الالتزامات، التعويضات)
- أضف بنود حماية مناسبة""",

    "COURT_PLEADING": """أنت متخصص في صياغة الدعاوى القضائية. عند كتابة صحيفة دعوى:
- حدد المحكمة المختصة
- اذكر بيانات الأطراف كاملة
- اشرح الوقائع بوضوح
- اذكر الأسانيد القانونية
- حدد الطلبات بدقة""",
}

# Document generator
DOCUMENT_TEMPLATE_TYPES = {
    "defense": "مذكرة دفاع",
    "lawsuit": "صحيفة دعوى",
    "objection": "طلب اعتراض",
    "notice": "إنذار رسمي",
}

DOCUMENT_GENERATION_PROMPT = """
أنشئ {template_name} قانونية استنادًا إلى البيانات التالية:
- الخصم: {opponent}
- المحكمة: {court}
- رقم الدعوى: {case_number}
- الوقائع: {facts}
- الطلبات: {requests}
- ملاحظات إضافية: {notes}
صياغة رسمية قانونية باللغة العربية."""
