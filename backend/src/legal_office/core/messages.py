"""
User-facing Arabic messages.

The API returns a generic Arabic message chosen by HTTP status, while the
English diagnostic detail travels in ``metadata.errors``.
"""

LOGIN_REQUIRED = "يجب تسجيل الدخول أولاً"
INVALID_CREDENTIALS = "بيانات الدخول غير صحيحة"
CREDENTIALS_REQUIRED = "البريد الإلكتروني وكلمة المرور مطلوبان"
EMAIL_IN_USE = "البريد الإلكتروني مستخدم بالفعل"
EMPTY_MESSAGE = "الرجاء إدخال رسالة"
CORRECTION_REQUIRED = "يرجى إدخال التصحيح"
NO_PREDEFINED_RESPONSES = "لا توجد ردود محددة مسبقاً متاحة"
NO_GEMINI_RESPONSE = "لا يوجد رد من Gemini."
AI_TIMEOUT = "انتهت مهلة الطلب"
AI_ABORTED = "تم إلغاء الطلب"
AI_SERVICE_ERROR = "حدث خطأ أثناء الاتصال بالخدمة"
AI_GENERIC_ERROR = "حدث خطأ أثناء الاتصال بخدمة الذكاء الاصطناعي"
AI_NOT_CONFIGURED = "خدمة الذكاء الاصطناعي غير مهيأة"
DOCUMENT_GENERATION_FAILED = "حدث خطأ أثناء توليد المستند."

STATUS_MESSAGES = {
    400: "طلب غير صالح",
    401: LOGIN_REQUIRED,
    403: "ليس لديك صلاحية للوصول إلى هذا المورد",
    404: "العنصر المطلوب غير موجود",
    409: "البيانات متعارضة مع سجل موجود",
    422: "البيانات المدخلة غير صحيحة",
    429: "عدد الطلبات كبير، حاول لاحقاً",
    500: "حدث خطأ غير متوقع",
    502: AI_GENERIC_ERROR,
    503: AI_NOT_CONFIGURED,
    504: AI_TIMEOUT,
}


def message_for_status(status_code: int) -> str:
    """Return the generic Arabic message for an HTTP status."""
    if status_code in STATUS_MESSAGES:
        return STATUS_MESSAGES[status_code]
    if status_code >= 500:
        return STATUS_MESSAGES[500]
    return STATUS_MESSAGES[400]
