"""원격 레포지토리 베이스 클래스.

Base class for remote persistence repositories. The remote side of the
portal is append-and-list only, so the base offers exactly those two
operations.

Usage:
    class IssueReportRepository(BaseRepository[IssueReport]):
        def __init__(self) -> None:
            super().__init__(IssueReport)
"""

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from civicconnect.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 생성/조회 레포지토리.

    Attributes:
        model: SQLAlchemy 모델 클래스 (Mapped model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_all(self, db: AsyncSession, order_by: Any | None = None) -> Sequence[ModelType]:
        """전체 행 조회 — All rows, optionally ordered.

        Args:
            db: 비동기 세션 (Async session)
            order_by: 정렬 표현식 (Ordering expression)
        """
        query: Select = select(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        return (await db.execute(query)).scalars().all()

    async def create(self, db: AsyncSession, obj_data: dict[str, Any]) -> ModelType:
        """행 추가 후 flush — 커밋은 호출자가 담당 (Caller owns the commit).

        Returns:
            ModelType: 저장소가 부여한 값(id 등)이 채워진 행 (Row with store-assigned values)
        """
        row: ModelType = self.model(**obj_data)
        db.add(row)
        await db.flush()
        await db.refresh(row)
        return row
