from sqlmodel import Field, SQLModel


class MachineCostcenter(SQLModel, table=True):
    __tablename__ = "machine_costcenter"

    id: int | None = Field(default=None, primary_key=True)
    machine_id: str = Field(index=True, unique=True)
    costcenter: str
