"""Transactions, permissions, BACKUP, RESTORE, DBCC and server administration."""

from typing import List, Optional

from tsqlparser.models.base import Node
from tsqlparser.models.expressions import VariableRef
from tsqlparser.models.statements import (
    AlterDatabase,
    BackupDatabase,
    BackupDevice,
    BeginTransaction,
    Checkpoint,
    CommitTransaction,
    DatabaseFile,
    Dbcc,
    EnableTrigger,
    Grant,
    MirrorTo,
    Permission,
    Reconfigure,
    RestoreDatabase,
    RollbackTransaction,
    SaveTransaction,
)
from tsqlparser.models.token import Token, TokenKind

_TRANSACTION_WORDS = ("TRAN", "TRANSACTION")
_DEVICE_KINDS = ("DISK", "URL", "TAPE")
_FILE_OPTIONS = ("FILE", "FILEGROUP", "PAGE", "READ_WRITE_FILEGROUPS")
_PERMISSION_STOP = frozenset(["ON", "TO", "FROM"])
_TRANSACTION_NAME_STOP = frozenset(["END", "ELSE", "WITH"])
_FILE_VERBS = ("ADD", "MODIFY", "REMOVE")


class AdminParser:
    """Mixin: transaction control and server administration."""

    # Transactions

    def _parse_transaction_name(self) -> Optional[Node]:
        token = self.current
        if token.kind == TokenKind.VARIABLE:
            self.advance()
            return VariableRef(name=token.text, span=token.span)
        if token.line_start and token.upper in self.dialect.statement_starters:
            return None
        if self.is_identifier():
            return self.identifier_part()
        # reserved words name a transaction on the same line: ``BEGIN TRAN Outer``
        if (
            token.kind == TokenKind.KEYWORD
            and not token.line_start
            and token.upper not in self.dialect.statement_starters
            and token.upper not in _TRANSACTION_NAME_STOP
        ):
            return self.name_part()
        return None

    def parse_begin_transaction(self) -> BeginTransaction:
        start = self.expect_word("BEGIN")
        distributed = bool(self.match_word("DISTRIBUTED"))
        self.expect_word(*_TRANSACTION_WORDS)
        name = self._parse_transaction_name()
        with_mark = False
        mark = None
        if self.is_word("WITH") and self.is_word("MARK", 1):
            self.advance()
            self.advance()
            with_mark = True
            if self.current.kind == TokenKind.STRING:
                mark = self.parse_string()
        return BeginTransaction(
            name=name, distributed=distributed, mark=mark, with_mark=with_mark, span=self.span_from(start)
        )

    def parse_commit(self) -> CommitTransaction:
        start = self.expect_word("COMMIT")
        work = False
        name = None
        if self.match_word("WORK"):
            work = True
        elif self.match_word(*_TRANSACTION_WORDS):
            name = self._parse_transaction_name()
        options = ()
        if self.is_word("WITH") and self.is_punct("(", 1):
            self.advance()
            options = self.parse_parenthesized_options()
        return CommitTransaction(name=name, work=work, options=options, span=self.span_from(start))

    def parse_rollback(self) -> RollbackTransaction:
        start = self.expect_word("ROLLBACK")
        work = False
        name = None
        if self.match_word("WORK"):
            work = True
        elif self.match_word(*_TRANSACTION_WORDS):
            name = self._parse_transaction_name()
        return RollbackTransaction(name=name, work=work, span=self.span_from(start))

    def parse_save(self) -> SaveTransaction:
        start = self.expect_word("SAVE")
        self.expect_word(*_TRANSACTION_WORDS)
        name = self._parse_transaction_name()
        if name is None:
            raise self.unexpected("savepoint name")
        return SaveTransaction(name=name, span=self.span_from(start))

    # BACKUP / RESTORE

    def _parse_name_or_variable(self) -> Node:
        token = self.current
        if token.kind == TokenKind.VARIABLE:
            self.advance()
            return VariableRef(name=token.text, span=token.span)
        return self.name_part()

    def _parse_backup_files(self):
        files = []
        while self.is_any_word(_FILE_OPTIONS):
            files.append(self.parse_option_item(stop_words=("TO", "FROM")))
            if not self.match_punct(","):
                break
        return tuple(files)

    def _parse_backup_device(self) -> BackupDevice:
        start = self.current
        kind = None
        if self.is_any_word(_DEVICE_KINDS) and self.is_op("=", 1):
            kind = self.advance().upper
            self.advance()
        token = self.current
        if token.is_word or token.kind == TokenKind.QUOTED_IDENTIFIER:
            value = self.parse_option_value()
        else:
            value = self.parse_expression()
        return BackupDevice(kind=kind, value=value, span=self.span_from(start))

    def _parse_backup_devices(self):
        devices = [self._parse_backup_device()]
        while self.match_punct(","):
            devices.append(self._parse_backup_device())
        return tuple(devices)

    def _parse_with_options(self):
        if not self.match_word("WITH"):
            return ()
        return self.parse_option_list()

    def parse_backup(self) -> Optional[BackupDatabase]:
        start = self.expect_word("BACKUP")
        if not self.is_any_word(("DATABASE", "LOG")):
            return None
        kind = self.advance().upper
        database = self._parse_name_or_variable()
        files = self._parse_backup_files()
        self.expect_word("TO")
        devices = self._parse_backup_devices()
        mirrors: List[MirrorTo] = []
        while self.is_word("MIRROR"):
            mirror_start = self.advance()
            self.expect_word("TO")
            mirrors.append(MirrorTo(devices=self._parse_backup_devices(), span=self.span_from(mirror_start)))
        options = self._parse_with_options()
        return BackupDatabase(
            kind=kind,
            database=database,
            files=files,
            devices=devices,
            mirrors=tuple(mirrors),
            options=options,
            span=self.span_from(start),
        )

    def parse_restore(self) -> Optional[RestoreDatabase]:
        start = self.expect_word("RESTORE")
        if not self.current.is_word:
            raise self.unexpected("DATABASE, LOG or a RESTORE command")
        kind = self.advance().upper
        database = None
        files = ()
        if kind in ("DATABASE", "LOG"):
            database = self._parse_name_or_variable()
            files = self._parse_backup_files()
        elif kind not in ("FILELISTONLY", "HEADERONLY", "LABELONLY", "VERIFYONLY", "REWINDONLY"):
            return None
        devices = ()
        if self.match_word("FROM"):
            devices = self._parse_backup_devices()
        options = self._parse_with_options()
        return RestoreDatabase(
            kind=kind,
            database=database,
            files=files,
            devices=devices,
            options=options,
            span=self.span_from(start),
        )

    # GRANT / REVOKE / DENY

    def parse_grant(self) -> Grant:
        start = self.expect_word("GRANT", "REVOKE", "DENY")
        action = start.upper
        grant_option_for = action == "REVOKE" and self.match_words("GRANT", "OPTION", "FOR")

        permissions = [self._parse_permission()]
        while self.match_punct(","):
            permissions.append(self._parse_permission())

        securable_class = None
        securable = None
        if self.match_word("ON"):
            securable_class = self._parse_securable_class()
            securable = self.multipart_identifier(first=self.name_part())

        if action == "REVOKE":
            self.expect_word("TO", "FROM")
        else:
            self.expect_word("TO")
        principals = [self.name_part()]
        while self.match_punct(","):
            principals.append(self.name_part())

        with_grant_option = action == "GRANT" and self.match_words("WITH", "GRANT", "OPTION")
        cascade = action != "GRANT" and bool(self.match_word("CASCADE"))
        as_principal = None
        if self.match_word("AS"):
            as_principal = self.name_part()
        return Grant(
            action=action,
            permissions=tuple(permissions),
            securable_class=securable_class,
            securable=securable,
            principals=tuple(principals),
            grant_option_for=grant_option_for,
            with_grant_option=with_grant_option,
            cascade=cascade,
            as_principal=as_principal,
            span=self.span_from(start),
        )

    def _parse_permission(self) -> Permission:
        start = self.current
        words: List[str] = []
        while self.current.is_word and self.current.upper not in _PERMISSION_STOP:
            words.append(self.advance().upper)
        if not words:
            raise self.unexpected("permission")
        columns = ()
        if self.is_punct("("):
            columns = self.identifier_list()
        return Permission(name=" ".join(words), columns=columns, span=self.span_from(start))

    def _parse_securable_class(self) -> Optional[str]:
        """``SCHEMA::``, ``OBJECT::``, ``XML SCHEMA COLLECTION::``."""
        offset = 0
        while self.peek(offset).is_word:
            offset += 1
        if offset == 0 or not self.is_op("::", offset):
            return None
        words = [self.advance().upper for _ in range(offset)]
        self.advance()
        return " ".join(words)

    # DBCC

    def parse_dbcc(self) -> Dbcc:
        start = self.expect_word("DBCC")
        if not self.current.is_word:
            raise self.unexpected("DBCC command")
        command = self.advance().upper
        arguments = []
        parenthesized = False
        if self.match_punct("("):
            parenthesized = True
            if not self.is_punct(")"):
                arguments.append(self.parse_option_value())
                while self.match_punct(","):
                    arguments.append(self.parse_option_value())
            self.expect_punct(")")
        options = self._parse_with_options()
        return Dbcc(
            command=command,
            arguments=tuple(arguments),
            parenthesized=parenthesized,
            options=options,
            span=self.span_from(start),
        )

    # ALTER DATABASE

    def parse_alter_database(self, start: Token) -> Optional[AlterDatabase]:
        if self.at_words("DATABASE", "SCOPED"):
            return None
        self.expect_word("DATABASE")
        database = self.name_part()

        if self.match_word("SET"):
            options = self.parse_option_list(stop_words=("WITH",))
            termination = None
            if self.match_word("WITH"):
                termination = self._parse_termination()
            return AlterDatabase(
                database=database,
                action="SET",
                options=options,
                termination=termination,
                span=self.span_from(start),
            )
        if self.match_word("COLLATE"):
            collation = self.name_part()
            return AlterDatabase(database=database, action="COLLATE", target=collation, span=self.span_from(start))
        if self.match_words("MODIFY", "NAME"):
            self.expect_op("=")
            new_name = self.name_part()
            return AlterDatabase(database=database, action="MODIFY NAME", target=new_name, span=self.span_from(start))

        verb = self.expect_word(*_FILE_VERBS).upper
        if self.match_word("FILEGROUP"):
            filegroup = self.name_part()
            prop = None
            if verb != "REMOVE" and self.current.is_word and not self._at_line_statement():
                prop = self.parse_option_item()
            return AlterDatabase(
                database=database,
                action=f"{verb} FILEGROUP",
                filegroup=filegroup,
                filegroup_property=prop,
                span=self.span_from(start),
            )

        log = verb == "ADD" and bool(self.match_word("LOG"))
        self.expect_word("FILE")
        action = f"{verb} LOG FILE" if log else f"{verb} FILE"
        if verb == "REMOVE":
            target = self.parse_string() if self.current.kind == TokenKind.STRING else self.name_part()
            return AlterDatabase(database=database, action=action, target=target, span=self.span_from(start))

        files = [self._parse_database_file()]
        while self.match_punct(","):
            files.append(self._parse_database_file())
        filegroup = None
        if verb == "ADD" and not log and self.match_words("TO", "FILEGROUP"):
            filegroup = self.name_part()
        return AlterDatabase(
            database=database,
            action=action,
            files=tuple(files),
            filegroup=filegroup,
            span=self.span_from(start),
        )

    def _parse_database_file(self) -> DatabaseFile:
        start = self.current
        options = self.parse_parenthesized_options()
        return DatabaseFile(options=options, span=self.span_from(start))

    def _parse_termination(self) -> str:
        """``ROLLBACK IMMEDIATE``, ``ROLLBACK AFTER n [SECONDS]`` or ``NO_WAIT``."""
        words: List[str] = []
        while self.current.is_word or self.current.kind == TokenKind.NUMBER:
            if self._at_line_statement():
                break
            token = self.advance()
            words.append(token.upper if token.is_word else token.text)
        if not words:
            raise self.unexpected("ROLLBACK or NO_WAIT")
        return " ".join(words)

    def _at_line_statement(self) -> bool:
        token = self.current
        return token.line_start and token.upper in self.dialect.statement_starters

    # RECONFIGURE / CHECKPOINT

    def parse_reconfigure(self) -> Reconfigure:
        start = self.expect_word("RECONFIGURE")
        override = self.match_words("WITH", "OVERRIDE")
        return Reconfigure(override=override, span=self.span_from(start))

    def parse_checkpoint(self) -> Checkpoint:
        start = self.expect_word("CHECKPOINT")
        duration = None
        if self.current.kind == TokenKind.NUMBER:
            duration = self.parse_expression()
        return Checkpoint(duration=duration, span=self.span_from(start))

    # ENABLE / DISABLE TRIGGER

    def parse_enable_trigger(self) -> Optional[EnableTrigger]:
        if not self.is_word("TRIGGER", 1):
            return None
        start = self.expect_word("ENABLE", "DISABLE")
        self.expect_word("TRIGGER")
        triggers = []
        if not self.match_word("ALL"):
            triggers.append(self.multipart_identifier())
            while self.match_punct(","):
                triggers.append(self.multipart_identifier())
        self.expect_word("ON")
        on_target = None
        on_scope = None
        if self.match_words("ALL", "SERVER"):
            on_scope = "ALL SERVER"
        elif self.match_word("DATABASE"):
            on_scope = "DATABASE"
        else:
            on_target = self.multipart_identifier()
        return EnableTrigger(
            enable=start.upper == "ENABLE",
            triggers=tuple(triggers),
            on_target=on_target,
            on_scope=on_scope,
            span=self.span_from(start),
        )
