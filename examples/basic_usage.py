"""Basic usage example for modelscheme."""

import json
import logging
from typing import Any, Optional

from sqlalchemy import JSON, ForeignKey, Integer, String, Text, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship, selectinload

from modelscheme import Serializer, register_model, serialize


class Base(DeclarativeBase):
    pass


def add_links(output, record, scheme_name, scheme):
    """Attach a self link to every serialized document."""
    output["links"] = {"self": f"/documents/{record.id}"}
    return output


@register_model(
    schemes={
        "summary": {"include": ["id", "title"]},
        "full": {
            "include": ["@all", "sections"],
            "as": {"meta": "metadata"},
            "assoc": {"sections": "outline"},
        },
    },
    default_scheme="summary",
    post_serialize=add_links,
)
class Document(Base):
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    meta: Mapped[Optional[dict[str, Any]]] = mapped_column("metadata", JSON, nullable=True)

    sections: Mapped[list["Section"]] = relationship("Section", back_populates="document")


@register_model(
    schemes={
        "outline": {"include": ["heading", "word_count"], "exclude": ["@fk"]},
    }
)
class Section(Base):
    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    document_id: Mapped[int] = mapped_column(Integer, ForeignKey("documents.id"), nullable=False)
    heading: Mapped[str] = mapped_column(String(500), nullable=False)
    body: Mapped[str] = mapped_column(Text, nullable=False, default="")

    document: Mapped["Document"] = relationship("Document", back_populates="sections")

    def word_count(self) -> int:
        return len(self.body.split())


def main():
    """Demonstrate serializing records loaded from a database."""
    logging.basicConfig(level=logging.DEBUG)

    engine = create_engine("sqlite://")
    Base.metadata.create_all(bind=engine)

    with Session(engine) as session:
        doc = Document(title="Getting Started Guide", meta={"version": "1.0"})
        doc.sections = [
            Section(heading="Introduction", body="This is the introduction section."),
            Section(heading="Installation", body="Install the package with pip."),
        ]
        session.add(doc)
        session.commit()

        documents = session.scalars(select(Document).options(selectinload(Document.sections))).all()

        # Default scheme of the model
        print(json.dumps(serialize(documents), indent=2))

        # Named scheme with nested sections
        print(json.dumps(Serializer.serialize_many(documents, Document, "full"), indent=2))


if __name__ == "__main__":
    main()
