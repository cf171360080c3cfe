"""
Lendable item models.

Every catalog entry is one of four closed variants sharing the same
capability set (title, creator, summary line, availability, check out,
check in):

- Book: a printed book
- EBook: a digital book with a file size
- AudioBook: a recording with a running time
- Magazine: a periodical issue, whose creator is its editor

The variants are discriminated on the ``kind`` field so a plain dict can be
turned into the right model with ``parse_item``.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, TypeAdapter

ItemId = int | str


class ItemBase(BaseModel):
    """
    Fields and availability state shared by every item variant.

    Availability is private state: it starts out true and only changes
    through ``check_out`` and ``check_in``, which the lending ledger calls.
    """

    identifier: ItemId | None = Field(
        None,
        description="Registry key, assigned when the item is added",
        examples=[1, "EB-0042"],
    )

    title: str = Field(
        ...,
        description="Title of the item",
        min_length=1,
        max_length=500,
        examples=["The Master and Margarita", "1984"],
    )

    creator: str = Field(
        ...,
        description="Author, narrator-author or editor",
        min_length=1,
        max_length=200,
        examples=["Mikhail Bulgakov", "George Orwell"],
    )

    _available: bool = PrivateAttr(default=True)

    model_config = ConfigDict(
        validate_assignment=True,
        str_strip_whitespace=True,
        extra="forbid",
    )

    @property
    def is_available(self) -> bool:
        """True while no member holds the item."""
        return self._available

    def get_title(self) -> str:
        return self.title

    def get_creator(self) -> str:
        return self.creator

    def matches_title(self, title: str) -> bool:
        """Case-insensitive title comparison."""
        return self.title.casefold() == title.strip().casefold()

    def display_info(self) -> str:
        """One-line summary for listings."""
        return f"Title: {self.title}, Author: {self.creator}, Available: {self.is_available}"

    def check_out(self) -> bool:
        """Mark the item as lent out. Returns False if it already was."""
        if not self._available:
            return False
        self._available = False
        return True

    def check_in(self) -> bool:
        """Mark the item as back on the shelf. Returns False if it was not out."""
        if self._available:
            return False
        self._available = True
        return True


class Book(ItemBase):
    """A printed book."""

    kind: Literal["book"] = "book"


class EBook(ItemBase):
    """A digital book."""

    kind: Literal["ebook"] = "ebook"

    file_size_mb: int = Field(
        ...,
        description="Size of the book file in megabytes",
        ge=0,
        examples=[2, 500],
    )

    def display_info(self) -> str:
        return f"{super().display_info()}, File size: {self.file_size_mb} MB"


class AudioBook(ItemBase):
    """A recorded book."""

    kind: Literal["audiobook"] = "audiobook"

    duration_minutes: int = Field(
        ...,
        description="Total running time in minutes",
        ge=0,
        examples=[95, 1260],
    )

    narrator: str | None = Field(
        None,
        description="Voice of the recording, if credited",
        max_length=200,
    )

    @property
    def duration_label(self) -> str:
        hours, minutes = divmod(self.duration_minutes, 60)
        return f"{hours}h {minutes:02d}m"

    def display_info(self) -> str:
        info = f"{super().display_info()}, Duration: {self.duration_label}"
        if self.narrator:
            info += f", Narrator: {self.narrator}"
        return info


class Magazine(ItemBase):
    """A single issue of a periodical."""

    kind: Literal["magazine"] = "magazine"

    issue_number: int = Field(
        1,
        description="Issue number within the volume",
        ge=1,
    )

    def display_info(self) -> str:
        return (
            f"Title: {self.title} #{self.issue_number}, Editor: {self.creator}, "
            f"Available: {self.is_available}"
        )


Item = Annotated[Book | EBook | AudioBook | Magazine, Field(discriminator="kind")]

ITEM_KINDS: dict[str, type[ItemBase]] = {
    "book": Book,
    "ebook": EBook,
    "audiobook": AudioBook,
    "magazine": Magazine,
}

_item_adapter: TypeAdapter[Book | EBook | AudioBook | Magazine] = TypeAdapter(Item)


def parse_item(data: dict) -> ItemBase:
    """Build the right item variant from a dict carrying a ``kind`` key.

    Raises:
        pydantic.ValidationError: If the kind is unknown or a field is invalid
    """
    return _item_adapter.validate_python(data)
