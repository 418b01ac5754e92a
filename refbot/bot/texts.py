BTN_SHARE_CONTACT = "поделиться контактом"
BTN_GENERATE_LINK = "сгенерировать ссылку"

WELCOME = "Добро пожаловать! Выберите действие:"
INVITED_BY = "Вас пригласил {name}"
INVITER_FALLBACK = "пользователь с ID {user_id}"
CONTACT_PROMPT = "Пожалуйста, поделитесь своим контактом, нажав на кнопку ниже."
CONTACT_SAVED = "Контакт успешно сохранён!"
REFERRAL_LINK = "Ваша реферальная ссылка: {link}"


def inviter_name(user_id: int, username: str) -> str:
    return username or INVITER_FALLBACK.format(user_id=user_id)
