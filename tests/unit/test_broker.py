"""
Unit tests for Service Broker conversation statements.
"""

import pytest

from tsqlparser import parse
from tsqlparser.models.expressions import IntegerLiteral, StringLiteral, VariableRef
from tsqlparser.models.queries import SelectAssignment
from tsqlparser.models.statements import (
    BeginDialog,
    Block,
    EndConversation,
    GetConversationGroup,
    If,
    Receive,
    SendOnConversation,
    Waitfor,
)


def single(source):
    script = parse(source)
    assert not script.has_errors, [str(d) for d in script.diagnostics]
    assert len(script.statements) == 1
    return script.statements[0]


class TestDialogs:
    """Test BEGIN DIALOG and SEND."""

    def test_begin_dialog(self):
        statement = single(
            "BEGIN DIALOG CONVERSATION @h FROM SERVICE [//Demo/Initiator] TO SERVICE N'//Demo/Target' "
            "ON CONTRACT [//Demo/Contract] WITH ENCRYPTION = OFF, LIFETIME = 600"
        )

        assert isinstance(statement, BeginDialog)
        assert statement.handle.name == "@h"
        assert statement.from_service.value == "//Demo/Initiator"
        assert isinstance(statement.to_service, StringLiteral)
        assert statement.to_service.value == "//Demo/Target"
        assert statement.contract.value == "//Demo/Contract"
        assert [o.name for o in statement.options] == ["ENCRYPTION", "LIFETIME"]

    def test_begin_dialog_with_variables(self):
        """Test services named by variables, as in generated broker code."""
        statement = single("BEGIN DIALOG @h FROM SERVICE @from TO SERVICE @to, 'CURRENT DATABASE'")

        assert isinstance(statement.from_service, VariableRef)
        assert isinstance(statement.to_service, VariableRef)
        assert statement.broker_instance.value == "CURRENT DATABASE"
        assert statement.contract is None

    def test_send_with_message_type_and_body(self):
        statement = single("SEND ON CONVERSATION @h MESSAGE TYPE [//Demo/Request] (@body)")

        assert isinstance(statement, SendOnConversation)
        assert [c.name for c in statement.conversations] == ["@h"]
        assert statement.message_type.value == "//Demo/Request"
        assert isinstance(statement.body, VariableRef)

    def test_send_on_several_conversations(self):
        statement = single("SEND ON CONVERSATION (@a, @b) MESSAGE TYPE @type")

        assert len(statement.conversations) == 2
        assert isinstance(statement.message_type, VariableRef)
        assert statement.body is None


class TestReceive:
    """Test RECEIVE, GET CONVERSATION GROUP and the WAITFOR forms around them."""

    def test_receive_into_variables(self):
        statement = single(
            "RECEIVE TOP (1) @h = conversation_handle, @body = CAST(message_body AS nvarchar(max)), "
            "message_type_name FROM dbo.TargetQueue WHERE conversation_group_id = @group"
        )

        assert isinstance(statement, Receive)
        assert isinstance(statement.top.value, IntegerLiteral)
        assert statement.top.value.value == 1
        assert len(statement.items) == 3
        assert isinstance(statement.items[0], SelectAssignment)
        assert statement.queue.name == "TargetQueue"
        assert statement.where is not None

    def test_receive_into_table_variable(self):
        statement = single("RECEIVE * FROM dbo.TargetQueue INTO @messages")

        assert statement.top is None
        assert statement.into.name == "@messages"

    def test_waitfor_receive(self):
        """Test WAITFOR (RECEIVE ...), TIMEOUT n."""
        statement = single(
            "WAITFOR (\n    RECEIVE TOP (1) @h = conversation_handle\n    FROM dbo.TargetQueue\n), TIMEOUT 5000"
        )

        assert isinstance(statement, Waitfor)
        assert statement.kind is None
        assert isinstance(statement.statement, Receive)
        assert statement.timeout.value == 5000

    def test_waitfor_get_conversation_group(self):
        statement = single("WAITFOR (GET CONVERSATION GROUP @g FROM dbo.TargetQueue), TIMEOUT 1000")

        assert isinstance(statement.statement, GetConversationGroup)
        assert statement.statement.variable.name == "@g"

    def test_waitfor_requires_receive(self):
        """Test only RECEIVE or GET CONVERSATION GROUP may be waited on."""
        script = parse("WAITFOR (SELECT 1), TIMEOUT 10")

        assert script.has_errors


class TestEndConversation:
    """Test END CONVERSATION and its place among block terminators."""

    @pytest.mark.parametrize(
        "source, cleanup, has_error",
        [
            ("END CONVERSATION @h", False, False),
            ("END CONVERSATION @h WITH CLEANUP", True, False),
            ("END CONVERSATION @h WITH ERROR = 50001 DESCRIPTION = 'failed'", False, True),
        ],
    )
    def test_forms(self, source, cleanup, has_error):
        statement = single(source)

        assert isinstance(statement, EndConversation)
        assert statement.conversation.name == "@h"
        assert statement.cleanup is cleanup
        assert (statement.error is not None) is has_error

    def test_error_arguments(self):
        statement = single("END CONVERSATION @h\n    WITH ERROR = @code\n    DESCRIPTION = @message;")

        assert statement.error.name == "@code"
        assert statement.description.name == "@message"

    def test_inside_block(self):
        """Test END CONVERSATION does not close the enclosing BEGIN ... END."""
        block = single("BEGIN\n    END CONVERSATION @h;\n    COMMIT;\nEND")

        assert isinstance(block, Block)
        assert [s.node_type for s in block.statements] == ["EndConversation", "CommitTransaction"]

    def test_as_if_branch(self):
        statement = single("IF @type = N'end' END CONVERSATION @h ELSE PRINT 'other'")

        assert isinstance(statement, If)
        assert isinstance(statement.then, EndConversation)
        assert statement.else_ is not None
