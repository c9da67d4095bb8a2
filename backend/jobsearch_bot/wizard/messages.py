"""User-facing texts.

All chat copy lives here so the step table and the dispatcher stay free of
string literals. Texts are Russian: the catalog and the job board are hh.ru.
HTML-formatted texts are marked with an _HTML suffix.
"""

# =============================================================================
# Commands
# =============================================================================

GREETING_HTML = (
    "👋 <b>Привет, {first_name}!</b>\n\n"
    "Для начала работы авторизуйся через hh.ru:"
)
GREETING_FALLBACK_NAME = "друг"
AUTH_BUTTON = "🚀 Авторизоваться на hh.ru"

HELP_HTML = (
    "🤖 <b>Помощь по боту:</b>\n\n"
    "<b>/start</b> - Начать работу с ботом\n"
    "<b>/search</b> - Начать новый поиск вакансий\n"
    "<b>/help</b> - Показать это сообщение\n\n"
    "После авторизации вы сможете искать вакансии по вашему резюме с HH.ru."
)

AUTH_CONFIRMED = "✅ Авторизация подтверждена. Начинаем подбор вакансий..."

IDENTITY_MISSING = "Не удалось определить ваш Telegram ID."

# =============================================================================
# Sentinel labels
# =============================================================================

ALL_REGIONS_LABEL = "🌍 Все регионы"
ANY_LABEL = "❌ Не важно"

# =============================================================================
# Step 0: resume
# =============================================================================

CHOOSE_RESUME = "Выберите резюме:"
REPROMPT_RESUME = "Пожалуйста, выберите резюме нажатием на кнопку."
NO_RESUMES = "Резюме не найдено. Пожалуйста, авторизуйтесь через /start."
RESUMES_FAILED = "Ошибка при получении резюме. Попробуйте позже."

# =============================================================================
# Steps 1-2: region, subregion
# =============================================================================

CHOOSE_REGION = "Выберите страну / регион:"
REPROMPT_REGION = "Пожалуйста, выберите регион нажатием на кнопку."
REGION_NOT_FOUND = "Регион не найден. Пожалуйста, попробуйте снова."
REGION_WITHOUT_AREAS = 'Регион "{name}" выбран. Теперь выберите график работы.'
REGIONS_FAILED = "Ошибка при получении регионов. Попробуйте позже."

CHOOSE_SUBREGION = (
    "Вы выбрали: {name}\n\n"
    "Хотите выбрать конкретную область или искать по всем регионам?"
)
REPROMPT_SUBREGION = "Пожалуйста, выберите область нажатием на кнопку."
ALL_REGIONS_ACK = "Выбраны все регионы"
ALL_REGIONS_CHOSEN = "✅ Выбраны все регионы. Теперь выберите график работы."
SUBREGION_CHOSEN = "Область выбрана. Теперь выберите график работы."
SUBREGIONS_FAILED = "Ошибка при получении областей. Попробуйте позже."

# =============================================================================
# Steps 3-5: schedule, employment, professional area
# =============================================================================

CHOOSE_SCHEDULE = "Выберите желаемый график работы:"
REPROMPT_SCHEDULE = "Пожалуйста, выберите график работы нажатием на кнопку."
SCHEDULE_CHOSEN = "✅ График выбран. Теперь выберите тип занятости."
SCHEDULE_ANY = "✅ График работы: не важно. Теперь выберите тип занятости."
SCHEDULES_FAILED = "Ошибка при получении графиков работы. Попробуйте позже."

CHOOSE_EMPLOYMENT = "Выберите тип занятости:"
REPROMPT_EMPLOYMENT = "Пожалуйста, выберите тип занятости нажатием на кнопку."
EMPLOYMENT_CHOSEN = (
    "✅ Тип занятости выбран. Теперь выберите профессиональную область."
)
EMPLOYMENT_ANY = (
    "✅ Тип занятости: не важно. Теперь выберите профессиональную область."
)
EMPLOYMENTS_FAILED = "Ошибка при получении типов занятости. Попробуйте позже."

CHOOSE_PROFESSIONAL_AREA = "Выберите профессиональную область:"
REPROMPT_PROFESSIONAL_AREA = (
    "Пожалуйста, выберите профессиональную область нажатием на кнопку."
)
PROFESSIONAL_AREA_CHOSEN = "✅ Профессиональная область выбрана."
PROFESSIONAL_AREA_ANY = "✅ Профессиональная область: не важно."
PROFESSIONAL_AREAS_FAILED = (
    "Ошибка при получении профессиональных областей. Попробуйте позже."
)

# =============================================================================
# Steps 6-7: keywords, cover letter
# =============================================================================

ENTER_KEYWORDS = "Введите ключевые слова для поиска (через пробел):"
REPROMPT_KEYWORDS = "Пожалуйста, введите ключевые слова."

ENTER_COVER_LETTER = (
    "Введите сопроводительное письмо (или отправьте '-' чтобы пропустить):"
)
REPROMPT_COVER_LETTER = (
    "Пожалуйста, введите сопроводительное письмо или отправьте '-'."
)

GENERIC_FAILURE = "Произошла ошибка. Начните заново командой /search."

# =============================================================================
# Results
# =============================================================================

SEARCHING = "🔍 Ищем подходящие вакансии..."
NO_RESULTS = "😔 К сожалению, по вашим критериям вакансий не найдено."
RESULTS_FOUND = "✅ Найдено {total} вакансий. Показываю первые {shown}:"
SEARCH_FAILED = "😞 Произошла ошибка при поиске вакансий. Попробуйте позже."
RESULT_FAILED = "Не удалось отправить информацию о вакансии"

VACANCY_HTML = (
    "<b>{name}</b>\n"
    "🏢 Компания: {employer}\n"
    "💰 Зарплата: {salary}\n"
    "📍 Регион: {area}\n"
    "📅 Опубликовано: {published}"
)
OPEN_VACANCY = "🔗 Открыть вакансию"

SALARY_NOT_SPECIFIED = "Не указана"
SALARY_GROSS = " (до вычета налогов)"
SALARY_NET = " (на руки)"
EMPLOYER_UNKNOWN = "Не указано"
AREA_UNKNOWN = "Не указан"
PUBLISHED_UNKNOWN = "Неизвестно"
UNTITLED_VACANCY = "Без названия"
