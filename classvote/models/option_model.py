from pydantic import BaseModel, Field


class Option(BaseModel):
    title: str = Field(..., examples=["Class Trip to the Museum"])
    imagePath: str = Field(..., examples=["/uploads/1718000000000-museum.jpg"])
    isActive: bool = True


class OptionOut(Option):
    id: str  # MongoDB _id as string
