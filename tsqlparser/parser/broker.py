"""Service Broker conversations: BEGIN DIALOG, SEND, RECEIVE and END CONVERSATION."""

from typing import List, Optional

from tsqlparser.models.base import Expression
from tsqlparser.models.expressions import VariableRef
from tsqlparser.models.statements import (
    BeginDialog,
    EndConversation,
    GetConversationGroup,
    Receive,
    SendOnConversation,
)
from tsqlparser.models.token import TokenKind


class BrokerParser:
    """Mixin: Service Broker statements."""

    def _parse_variable(self) -> VariableRef:
        token = self.current
        if token.kind != TokenKind.VARIABLE:
            raise self.unexpected("variable")
        self.advance()
        return VariableRef(name=token.text, span=token.span)

    def _parse_conversation_handle(self) -> Expression:
        if self.current.kind == TokenKind.VARIABLE:
            return self._parse_variable()
        return self.parse_expression()

    def parse_begin_dialog(self) -> BeginDialog:
        start = self.expect_word("BEGIN")
        self.expect_word("DIALOG")
        self.match_word("CONVERSATION")
        handle = self._parse_variable()
        self.expect_words("FROM", "SERVICE")
        from_service = self._parse_name_or_variable()
        self.expect_words("TO", "SERVICE")
        to_service = self.parse_expression()
        broker_instance = None
        if self.match_punct(","):
            broker_instance = self.parse_expression()
        contract = None
        if self.match_words("ON", "CONTRACT"):
            contract = self._parse_name_or_variable()
        options = ()
        if self.match_word("WITH"):
            options = self.parse_option_list()
        return BeginDialog(
            handle=handle,
            from_service=from_service,
            to_service=to_service,
            broker_instance=broker_instance,
            contract=contract,
            options=options,
            span=self.span_from(start),
        )

    def parse_send(self) -> SendOnConversation:
        start = self.expect_word("SEND")
        self.expect_words("ON", "CONVERSATION")
        conversations: List[Expression] = []
        if self.match_punct("("):
            conversations.append(self._parse_conversation_handle())
            while self.match_punct(","):
                conversations.append(self._parse_conversation_handle())
            self.expect_punct(")")
        else:
            conversations.append(self._parse_conversation_handle())
        message_type = None
        if self.match_words("MESSAGE", "TYPE"):
            message_type = self._parse_name_or_variable()
        body = None
        if self.match_punct("("):
            body = self.parse_expression()
            self.expect_punct(")")
        return SendOnConversation(
            conversations=tuple(conversations),
            message_type=message_type,
            body=body,
            span=self.span_from(start),
        )

    def parse_receive(self) -> Receive:
        start = self.expect_word("RECEIVE")
        top = self.parse_top_clause() if self.is_word("TOP") else None
        items = self.parse_select_items()
        self.expect_word("FROM")
        queue = self.multipart_identifier()
        into = None
        if self.match_word("INTO"):
            into = self._parse_variable()
        where = None
        if self.match_word("WHERE"):
            where = self.parse_expression()
        return Receive(
            top=top,
            items=tuple(items),
            queue=queue,
            into=into,
            where=where,
            span=self.span_from(start),
        )

    def parse_get_conversation_group(self) -> Optional[GetConversationGroup]:
        if not self.at_words("GET", "CONVERSATION", "GROUP"):
            return None
        start = self.current
        self.expect_words("GET", "CONVERSATION", "GROUP")
        variable = self._parse_variable()
        self.expect_word("FROM")
        queue = self.multipart_identifier()
        return GetConversationGroup(variable=variable, queue=queue, span=self.span_from(start))

    def parse_end_conversation(self) -> EndConversation:
        start = self.current
        self.expect_words("END", "CONVERSATION")
        conversation = self._parse_conversation_handle()
        error = None
        description = None
        cleanup = False
        if self.match_words("WITH", "ERROR"):
            self.expect_op("=")
            error = self.parse_expression()
            self.expect_word("DESCRIPTION")
            self.expect_op("=")
            description = self.parse_expression()
        elif self.match_words("WITH", "CLEANUP"):
            cleanup = True
        return EndConversation(
            conversation=conversation,
            error=error,
            description=description,
            cleanup=cleanup,
            span=self.span_from(start),
        )
