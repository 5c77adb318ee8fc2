"""
utils/constants.py

Purpose: Centralized static content

- All user-facing messages, per language (ru, uz, en)
- Button labels (roles, vehicle categories, skip)
- Restart commands

(Prevents hardcoding across the codebase)
"""

SUPPORTED_LANGUAGES = ("ru", "uz", "en")

RESTART_COMMANDS = ("/start",)

# ============================================================
# ENGLISH
# ============================================================

MESSAGES_EN = {
    # Start
    "start.welcome": "👋 Welcome to CargoLink! Let's finish setting up your account.",
    "start.welcome_back": "👋 Welcome back, {name}!",
    "start.choose_role": "Who are you? Choose your role below.",

    # Registration
    "registration.role_client": "Client",
    "registration.role_driver": "Driver",
    "registration.role_selected": "✅ Role selected: {role}",
    "registration.enter_first_name": "Please enter your first name:",
    "registration.enter_last_name": "Please enter your last name:",
    "registration.enter_birth_year": "Please enter your year of birth (for example 1990):",
    "registration.invalid_year": "❌ Please enter a valid year of birth.",
    "registration.share_contact": "📱 Please share your phone number using the button below.",
    "registration.contact_button": "📱 Share contact",
    "registration.share_contact_please": "Please use the button below to share your contact.",
    "registration.share_your_own_contact": "❌ Please share your own contact, not someone else's.",
    "registration.basic_info_completed": "✅ Basic information saved!",
    "registration.create_first_order": "Now let's create your first shipment request.",
    "registration.create_first_offer": "Now tell us about your vehicle.",
    "registration.enter_vehicle_model": "🚚 Enter your vehicle model:",
    "registration.choose_vehicle_category": "Choose your vehicle category:",
    "registration.vehicle_categories.light": "Light (up to 1.5 t)",
    "registration.vehicle_categories.medium": "Medium (1.5-5 t)",
    "registration.vehicle_categories.heavy": "Heavy (over 5 t)",
    "registration.vehicle_categories.special": "Special vehicle",
    "registration.enter_current_location": "📍 Enter your current city:",
    "registration.completed": "🎉 Registration completed! You can now use all features.",

    # Orders
    "orders.enter_from": "📍 Where should the cargo be picked up?",
    "orders.enter_to": "🏁 Where should it be delivered?",
    "orders.enter_description": "📝 Describe the cargo (weight, size, type):",
    "orders.enter_price": "💰 What price do you offer?",
    "orders.invalid_price": "❌ The price cannot be negative.",
    "orders.skip": "Skip",
    "orders.created": "📦 Your order has been created: {summary}",

    # Errors
    "errors.general": "❌ Something went wrong. Please try again or send /start.",
    "errors.invalid_input": "⚠️ That doesn't look right. Please try again.",
}

# ============================================================
# RUSSIAN
# ============================================================

MESSAGES_RU = {
    "start.welcome": "👋 Добро пожаловать в CargoLink! Давайте завершим регистрацию.",
    "start.welcome_back": "👋 С возвращением, {name}!",
    "start.choose_role": "Кто вы? Выберите роль ниже.",

    "registration.role_client": "Клиент",
    "registration.role_driver": "Водитель",
    "registration.role_selected": "✅ Выбрана роль: {role}",
    "registration.enter_first_name": "Введите ваше имя:",
    "registration.enter_last_name": "Введите вашу фамилию:",
    "registration.enter_birth_year": "Введите год рождения (например, 1990):",
    "registration.invalid_year": "❌ Введите корректный год рождения.",
    "registration.share_contact": "📱 Поделитесь номером телефона с помощью кнопки ниже.",
    "registration.contact_button": "📱 Отправить контакт",
    "registration.share_contact_please": "Пожалуйста, используйте кнопку ниже, чтобы отправить контакт.",
    "registration.share_your_own_contact": "❌ Отправьте свой контакт, а не чужой.",
    "registration.basic_info_completed": "✅ Основные данные сохранены!",
    "registration.create_first_order": "Теперь создадим вашу первую заявку на перевозку.",
    "registration.create_first_offer": "Теперь расскажите о вашем транспорте.",
    "registration.enter_vehicle_model": "🚚 Введите модель транспорта:",
    "registration.choose_vehicle_category": "Выберите категорию транспорта:",
    "registration.vehicle_categories.light": "Лёгкий (до 1,5 т)",
    "registration.vehicle_categories.medium": "Средний (1,5-5 т)",
    "registration.vehicle_categories.heavy": "Тяжёлый (свыше 5 т)",
    "registration.vehicle_categories.special": "Спецтехника",
    "registration.enter_current_location": "📍 Введите ваш текущий город:",
    "registration.completed": "🎉 Регистрация завершена! Теперь вам доступны все функции.",

    "orders.enter_from": "📍 Откуда забрать груз?",
    "orders.enter_to": "🏁 Куда доставить?",
    "orders.enter_description": "📝 Опишите груз (вес, габариты, тип):",
    "orders.enter_price": "💰 Какую цену вы предлагаете?",
    "orders.invalid_price": "❌ Цена не может быть отрицательной.",
    "orders.skip": "Пропустить",
    "orders.created": "📦 Ваша заявка создана: {summary}",

    "errors.general": "❌ Что-то пошло не так. Попробуйте ещё раз или отправьте /start.",
    "errors.invalid_input": "⚠️ Неверный ввод. Попробуйте ещё раз.",
}

# ============================================================
# UZBEK
# ============================================================

MESSAGES_UZ = {
    "start.welcome": "👋 CargoLink'ga xush kelibsiz! Ro'yxatdan o'tishni yakunlaymiz.",
    "start.welcome_back": "👋 Qaytganingiz bilan, {name}!",
    "start.choose_role": "Siz kimsiz? Quyida rolingizni tanlang.",

    "registration.role_client": "Mijoz",
    "registration.role_driver": "Haydovchi",
    "registration.role_selected": "✅ Tanlangan rol: {role}",
    "registration.enter_first_name": "Ismingizni kiriting:",
    "registration.enter_last_name": "Familiyangizni kiriting:",
    "registration.enter_birth_year": "Tug'ilgan yilingizni kiriting (masalan, 1990):",
    "registration.invalid_year": "❌ To'g'ri tug'ilgan yilni kiriting.",
    "registration.share_contact": "📱 Quyidagi tugma orqali telefon raqamingizni yuboring.",
    "registration.contact_button": "📱 Kontaktni yuborish",
    "registration.share_contact_please": "Iltimos, kontakt yuborish uchun quyidagi tugmadan foydalaning.",
    "registration.share_your_own_contact": "❌ Boshqa birovning emas, o'z kontaktingizni yuboring.",
    "registration.basic_info_completed": "✅ Asosiy ma'lumotlar saqlandi!",
    "registration.create_first_order": "Endi birinchi yuk arizangizni yaratamiz.",
    "registration.create_first_offer": "Endi transportingiz haqida ma'lumot bering.",
    "registration.enter_vehicle_model": "🚚 Transport modelini kiriting:",
    "registration.choose_vehicle_category": "Transport toifasini tanlang:",
    "registration.vehicle_categories.light": "Yengil (1,5 t gacha)",
    "registration.vehicle_categories.medium": "O'rta (1,5-5 t)",
    "registration.vehicle_categories.heavy": "Og'ir (5 t dan ortiq)",
    "registration.vehicle_categories.special": "Maxsus texnika",
    "registration.enter_current_location": "📍 Hozirgi shahringizni kiriting:",
    "registration.completed": "🎉 Ro'yxatdan o'tish yakunlandi! Endi barcha imkoniyatlar ochiq.",

    "orders.enter_from": "📍 Yukni qayerdan olish kerak?",
    "orders.enter_to": "🏁 Qayerga yetkazish kerak?",
    "orders.enter_description": "📝 Yukni tasvirlang (og'irligi, o'lchami, turi):",
    "orders.enter_price": "💰 Qancha narx taklif qilasiz?",
    "orders.invalid_price": "❌ Narx manfiy bo'lishi mumkin emas.",
    "orders.skip": "O'tkazib yuborish",
    "orders.created": "📦 Arizangiz yaratildi: {summary}",

    "errors.general": "❌ Xatolik yuz berdi. Qayta urinib ko'ring yoki /start yuboring.",
    "errors.invalid_input": "⚠️ Noto'g'ri kiritildi. Qayta urinib ko'ring.",
}

MESSAGES = {
    "en": MESSAGES_EN,
    "ru": MESSAGES_RU,
    "uz": MESSAGES_UZ,
}
