"""Sample data loaded into a fresh portal database."""

from datetime import datetime, timezone

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from unitportal.engines.promotion import rank_index
from unitportal.kernel.models import (
    Award,
    AwardLedgerEntry,
    ContentSection,
    NewsPost,
    NewsReaction,
    Personnel,
    Role,
    SectionKind,
    generate_uuid,
    nickname_key,
)
from unitportal.logging_config import get_logger

logger = get_logger(__name__)


def _day(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=timezone.utc)


SEED_PERSONNEL = [
    {
        "access_code": "ADMIN001",
        "nickname": "Командир",
        "rank": "Генерал",
        "rank_changed_at": _day("2025-01-01"),
        "position": "Командующий",
        "position_changed_at": _day("2025-01-01"),
        "role": Role.ADMIN,
    },
    {
        "access_code": "MOD001",
        "nickname": "Сержант Петров",
        "rank": "Старший сержант",
        "rank_changed_at": _day("2025-12-20"),
        "position": "Инструктор",
        "position_changed_at": _day("2025-12-25"),
        "role": Role.MODERATOR,
    },
    {
        "access_code": "USER001",
        "nickname": "Рядовой Иванов",
        "rank": "Рядовой",
        "rank_changed_at": _day("2026-01-07"),
        "position": "Боец",
        "position_changed_at": _day("2026-01-07"),
        "role": Role.USER,
    },
]

# (name, icon, holders by nickname)
SEED_AWARDS = [
    ('Медаль "За отвагу"', "🎖️", ["Командир", "Сержант Петров"]),
    ('Орден "За службу"', "🏅", []),
    ('Медаль "За выслугу лет"', "🥇", ["Командир"]),
]

# (title, body, author nickname, published, reacted by)
SEED_NEWS = [
    (
        "Открыта запись в Офицерскую Академию",
        "Начат набор в Офицерскую Академию для прапорщиков, желающих получить "
        "офицерское звание. Для записи обратитесь к командованию. Экзамены "
        "пройдут 15 января.",
        "Сержант Петров",
        _day("2026-01-07"),
        ["Командир"],
    ),
    (
        "Приказ о повышении сержантского состава",
        "В соответствии с графиком повышений объявляется о присвоении очередных "
        "званий сержантскому составу. Повышения состоятся в **субботу в 20:00** "
        "по МСК. Все кандидаты должны явиться на построение.",
        "Командир",
        _day("2026-01-08"),
        ["Сержант Петров", "Рядовой Иванов"],
    ),
]

# kind -> [(title, body, icon)]
SEED_SECTIONS = {
    SectionKind.DIVISION: [
        (
            "Разведывательный отряд",
            "Специализируется на сборе разведывательной информации и проведении тайных операций.",
            "Search",
        ),
        (
            "Штурмовая группа",
            "Основная боевая единица, специализирующаяся на прямых атаках и захвате территорий.",
            "Zap",
        ),
        (
            "Инженерный корпус",
            "Отвечает за строительство укреплений, разминирование и техническую поддержку.",
            "Wrench",
        ),
    ],
    SectionKind.INFO: [
        (
            "Система званий",
            "Полная информация о воинских званиях, требованиях к повышению и сроках службы.",
            "Star",
        ),
        (
            "Правила поведения",
            "Основные правила поведения на сервере и взаимодействия с другими участниками.",
            "Shield",
        ),
        (
            "Контакты командования",
            "Список контактов для связи с командованием и решения организационных вопросов.",
            "Phone",
        ),
    ],
    SectionKind.CHARTER: [
        (
            "Глава 1. Общие положения",
            "Настоящий устав регулирует порядок службы, права и обязанности "
            "военнослужащих. Все участники обязаны соблюдать положения устава и "
            "следовать приказам командования.",
            None,
        ),
        (
            "Глава 2. Воинские звания",
            "Установлены следующие воинские звания: Рядовой, Ефрейтор, Младший "
            "сержант, Сержант, Старший сержант, Старшина, Прапорщик, Младший "
            "лейтенант, Лейтенант, Старший лейтенант, Капитан, Майор, "
            "Подполковник, Полковник, Генерал. Повышение производится согласно "
            "графику и требованиям.",
            None,
        ),
        (
            "Глава 3. Дисциплина",
            "Воинская дисциплина является обязательным условием службы. Нарушение "
            "дисциплины влечёт применение дисциплинарных взысканий: замечание, "
            "выговор, понижение в звании, исключение из состава.",
            None,
        ),
        (
            "Глава 4. Порядок повышения",
            "Рядовой — Ефрейтор: через 2 дня после КМБ. Ефрейтор — Сержант: "
            "дважды в неделю. Сержант — Прапорщик: раз в неделю. Прапорщик — "
            "Младший Лейтенант: после Офицерской Академии. Младший Лейтенант — "
            "Старший Лейтенант: на офицерском собрании, минимум 10 дней на звании.",
            None,
        ),
    ],
}


async def seed_sample_data(session: AsyncSession) -> bool:
    """
    Load the sample unit into an empty database. Idempotent.

    Returns:
        True if data was written, False if the directory already had members
    """
    existing = await session.execute(select(func.count(Personnel.id)))
    if existing.scalar():
        logger.info("Sample data already present, skipping seed")
        return False

    members = {}
    for number, row in enumerate(SEED_PERSONNEL, start=1):
        record = Personnel(
            id=generate_uuid(),
            roster_number=number,
            access_code=row["access_code"],
            nickname=row["nickname"],
            nickname_key=nickname_key(row["nickname"]),
            rank=int(rank_index(row["rank"])),
            rank_changed_at=row["rank_changed_at"],
            position=row["position"],
            position_changed_at=row["position_changed_at"],
            role=row["role"],
            created_at=row["rank_changed_at"],
            updated_at=row["position_changed_at"],
        )
        session.add(record)
        members[record.nickname] = record

    for number, (name, icon, holders) in enumerate(SEED_AWARDS, start=1):
        award = Award(sequence=number, name=name, icon=icon, ledger=[])
        for nickname in holders:
            recipient = members[nickname]
            award.ledger.append(
                AwardLedgerEntry(
                    recipient_id=recipient.id,
                    recipient=recipient,
                    granted_at=recipient.rank_changed_at,
                )
            )
        session.add(award)

    for number, (title, body, author, published_at, reacted_by) in enumerate(SEED_NEWS, start=1):
        post = NewsPost(
            sequence=number,
            title=title,
            body=body,
            author_id=members[author].id,
            author=members[author],
            published_at=published_at,
            reactions=[],
        )
        for nickname in reacted_by:
            post.reactions.append(
                NewsReaction(personnel_id=members[nickname].id, reacted_at=published_at)
            )
        session.add(post)

    for kind, rows in SEED_SECTIONS.items():
        for number, (title, body, icon) in enumerate(rows, start=1):
            session.add(
                ContentSection(kind=kind.value, sequence=number, title=title, body=body, icon=icon)
            )

    await session.flush()
    logger.info(
        "Sample data seeded",
        extra={"personnel": len(members), "awards": len(SEED_AWARDS), "news": len(SEED_NEWS)},
    )
    return True
