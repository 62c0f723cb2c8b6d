"""
Translation fan-out helpers.

Every user-facing entity (project, campaign, product, category, content) owns
one translation row per language. Models expose the collection as
``translations`` with a delete-orphan cascade and a unique
(owner, language) constraint on the translation table.

Updates replace the whole set: callers must send every language they want to
keep, untouched languages are dropped.
"""
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session, selectinload

from .enums import Language


def _as_dict(translation) -> dict:
    if isinstance(translation, dict):
        return dict(translation)
    return translation.model_dump()


def dedupe_languages(translations: Iterable) -> List[dict]:
    """Collapse repeated languages, the last entry for a language wins."""
    by_language = {}
    for t in translations:
        row = _as_dict(t)
        by_language[row['language']] = row
    return list(by_language.values())


def build_translations(translation_model, translations: Iterable) -> list:
    return [translation_model(**row) for row in dedupe_languages(translations)]


def create_with_translations(db: Session, root, translation_model, translations: Iterable):
    """Attach translations to a new root and stage both for the next commit."""
    root.translations = build_translations(translation_model, translations)
    db.add(root)
    return root


def replace_translations(db: Session, root, translation_model, translations: Iterable):
    """
    Delete all translation rows of ``root`` then insert the new set.

    The delete is flushed first so the (owner, language) unique constraint
    does not trip on re-inserted languages. Nothing is committed here, the
    caller commits the root update and the new translations together.
    """
    root.translations.clear()
    db.flush()
    root.translations.extend(build_translations(translation_model, translations))
    return root


def translations_option(model, translation_model, lang: Optional[Language] = None, via=None):
    """
    Loader option for ``model.translations``, limited to ``lang`` when given.

    ``via`` chains the option under another loader, e.g. campaign -> projects.
    """
    attr = model.translations
    if lang:
        attr = attr.and_(translation_model.language == lang)
    if via is not None:
        return via.selectinload(attr)
    return selectinload(attr)


def display_translation(root, lang: Optional[Language] = None):
    """Translation in ``lang``, falling back to the first available one."""
    translations = list(root.translations or [])
    if lang:
        for t in translations:
            if t.language == lang:
                return t
    return translations[0] if translations else None
