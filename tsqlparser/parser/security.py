"""Logins, users and roles."""

from typing import List, Optional, Tuple

from tsqlparser.models.base import OptionItem
from tsqlparser.models.statements import (
    AlterPrincipal,
    CreatePrincipal,
    PrincipalKind,
    PrincipalOption,
    PrincipalSource,
)
from tsqlparser.models.token import Token

_PASSWORD_MODIFIERS = frozenset(["HASHED", "MUST_CHANGE", "UNLOCK", "OLD_PASSWORD"])
_SOURCE_KINDS = ("LOGIN", "CERTIFICATE", "WINDOWS")
_MEMBER_ACTIONS = ("MEMBER", "CREDENTIAL")


class SecurityParser:
    """Mixin: CREATE and ALTER for server and database principals."""

    def at_principal(self) -> bool:
        if self.is_any_word(("LOGIN", "USER", "ROLE")):
            return True
        return self.at_words("APPLICATION", "ROLE") or self.at_words("SERVER", "ROLE")

    def _parse_principal_kind(self) -> PrincipalKind:
        if self.match_words("APPLICATION", "ROLE"):
            return PrincipalKind.APPLICATION_ROLE
        if self.match_words("SERVER", "ROLE"):
            return PrincipalKind.SERVER_ROLE
        return PrincipalKind(self.expect_word("LOGIN", "USER", "ROLE").upper)

    def parse_create_principal(self, start: Token) -> CreatePrincipal:
        kind = self._parse_principal_kind()
        name = self.name_part()
        source = None
        if kind in (PrincipalKind.LOGIN, PrincipalKind.USER):
            source = self._parse_principal_source()
        authorization = None
        if kind in (PrincipalKind.ROLE, PrincipalKind.SERVER_ROLE) and self.match_word("AUTHORIZATION"):
            authorization = self.name_part()
        options = self._parse_principal_options()
        return CreatePrincipal(
            kind=kind,
            name=name,
            source=source,
            authorization=authorization,
            options=options,
            span=self.span_from(start),
        )

    def parse_alter_principal(self, start: Token) -> AlterPrincipal:
        kind = self._parse_principal_kind()
        name = self.name_part()
        action = None
        member = None
        if self.is_any_word(("ENABLE", "DISABLE")):
            action = self.advance().upper
        elif self.is_any_word(("ADD", "DROP")) and self.is_any_word(_MEMBER_ACTIONS, 1):
            action = f"{self.advance().upper} {self.advance().upper}"
            member = self.name_part()
        options = self._parse_principal_options()
        if action is None and not options:
            raise self.unexpected("ENABLE, DISABLE, ADD MEMBER, DROP MEMBER or WITH")
        return AlterPrincipal(
            kind=kind,
            name=name,
            action=action,
            member=member,
            options=options,
            span=self.span_from(start),
        )

    def _parse_principal_source(self) -> Optional[PrincipalSource]:
        start = self.current
        keyword = self.match_word("FOR", "FROM", "WITHOUT")
        if keyword is None:
            return None
        if keyword.upper == "WITHOUT":
            self.expect_word("LOGIN")
            return PrincipalSource(keyword="WITHOUT", kind="LOGIN", span=self.span_from(start))

        name = None
        if self.match_words("EXTERNAL", "PROVIDER"):
            kind = "EXTERNAL PROVIDER"
        elif self.match_words("ASYMMETRIC", "KEY"):
            kind = "ASYMMETRIC KEY"
            name = self.name_part()
        else:
            kind = self.expect_word(*_SOURCE_KINDS).upper
            if kind != "WINDOWS":
                name = self.name_part()
        return PrincipalSource(keyword=keyword.upper, kind=kind, name=name, span=self.span_from(start))

    def _parse_principal_options(self) -> Tuple[PrincipalOption, ...]:
        # ``WITH name AS (`` on the next line opens a common table expression instead
        if not self.is_word("WITH") or self.is_word("AS", 2) or self.is_punct("(", 2):
            return ()
        self.advance()
        options = [self._parse_principal_option()]
        while self.match_punct(","):
            options.append(self._parse_principal_option())
        return tuple(options)

    def _parse_principal_option(self) -> PrincipalOption:
        start = self.current
        option = self.parse_option_item(stop_words=_PASSWORD_MODIFIERS)
        modifiers: List[OptionItem] = []
        while self.current.is_word and self.current.upper in _PASSWORD_MODIFIERS:
            token = self.current
            if self.is_op("=", 1):
                modifiers.append(self.parse_option_item())
            else:
                self.advance()
                modifiers.append(OptionItem(name=token.upper, span=token.span))
        return PrincipalOption(option=option, modifiers=tuple(modifiers), span=self.span_from(start))
