"""Tests pour ExecCommandExecutor.

Les tests d'intégration lancent de vrais processus (echo, cat, bash,
timeout) ; les autres simulent subprocess.Popen.
"""

import io
import os
import shutil
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from exec_python_utils.commands import (
    AnsiCommandFormatter,
    ExecCommandExecutor,
    ExecutorSettings,
    RunCommandOptions,
    TIMEOUT_EXIT_CODE,
)
from exec_python_utils.errors import (
    CommandFailedError,
    CommandLaunchError,
    ErrorHandlerChain,
    InvalidCommandRequestError,
)
from exec_python_utils.logging.base import Logger

requires_posix_tools = pytest.mark.skipif(
    any(shutil.which(b) is None for b in ("bash", "cat", "echo", "timeout")),
    reason="bash, cat, echo et timeout sont requis",
)


def _make_mock_proc(stdout=b"", stderr=b"", returncode=0):
    """Crée un mock de Popen configuré."""
    mock_proc = MagicMock()
    mock_proc.stdout = io.BytesIO(stdout)
    mock_proc.stderr = io.BytesIO(stderr)
    mock_proc.stdin = MagicMock()
    mock_proc.wait.return_value = returncode
    mock_proc.__enter__.return_value = mock_proc
    mock_proc.__exit__.return_value = False
    return mock_proc


# --- Tests d'intégration ---


@requires_posix_tools
class TestExecCommandExecutorIntegration:
    """Tests avec de vrais processus."""

    def setup_method(self):
        """Initialise l'exécuteur pour chaque test."""
        self.executor = ExecCommandExecutor()

    def test_echo_hello(self):
        """Test de la sortie standard d'un echo."""
        output = self.executor.run_command(
            RunCommandOptions(command=["echo", "hello"])
        )
        assert output.get_return_code() == 0
        assert output.get_stdout_as_string() == "hello\n"
        assert output.get_stderr_as_bytes() == b""

    def test_stderr(self):
        """Test de la capture de stderr."""
        output = self.executor.run_command(
            RunCommandOptions(
                command=["bash", "-c", "echo 'hello world' 1>&2"]
            )
        )
        assert output.get_return_code() == 0
        assert output.get_stdout_as_string() == ""
        assert output.get_stderr_as_string() == "hello world\n"

    def test_sortie_sans_fin_de_ligne(self):
        """Test du reliquat final sans retour à la ligne."""
        output = self.executor.run_command(
            RunCommandOptions(command=["bash", "-c", "printf 'a\\nb'"])
        )
        assert output.get_stdout_as_bytes() == b"a\nb"

    @pytest.mark.parametrize("exit_code", range(0, 128))
    def test_codes_retour_autorises(self, exit_code):
        """Test que chaque code retour est restitué tel quel."""
        output = self.executor.run_command(
            RunCommandOptions(
                command=["bash", "-c", f"exit {exit_code}"],
                allow_all_exit_codes=True,
            )
        )
        assert output.get_return_code() == exit_code

    def test_code_retour_non_nul_leve_erreur(self):
        """Test qu'un code non nul lève CommandFailedError."""
        with pytest.raises(CommandFailedError) as exc_info:
            self.executor.run_command(
                RunCommandOptions(
                    command=["bash", "-c", "echo oups 1>&2; exit 3"]
                )
            )
        error = exc_info.value
        assert error.output.get_return_code() == 3
        assert "oups" in str(error)
        assert "bash -c" in str(error)

    def test_code_retour_non_nul_renseigne_run_error(self):
        """Test que run_error est renseigné pour un code non nul."""
        output = self.executor.run_command(
            RunCommandOptions(
                command=["bash", "-c", "exit 2"],
                allow_all_exit_codes=True,
            )
        )
        assert "2" in output.get_run_error_string_or_empty()

    @pytest.mark.parametrize("live", [False, True])
    def test_stdin_aller_retour(self, live, capsys):
        """Test que cat restitue stdin à l'identique."""
        data = b"  premiere ligne\n\nmilieu  \t\n  fin sans retour  "
        output = self.executor.run_command(
            RunCommandOptions(
                command=["cat"],
                stdin=data,
                live_output_on_stdout=live,
            )
        )
        assert output.get_stdout_as_bytes() == data
        captured = capsys.readouterr()
        if live:
            assert "  premiere ligne" in captured.out
        else:
            assert captured.out == ""

    @pytest.mark.parametrize("stdin", [None, b""])
    def test_stdin_appelant_non_transmis(self, stdin):
        """Test que le processus ne lit pas l'entrée de l'appelant."""
        read_fd, write_fd = os.pipe()
        os.write(write_fd, b"entree de l'appelant\n")
        os.close(write_fd)
        saved_fd = os.dup(0)
        os.dup2(read_fd, 0)
        try:
            output = self.executor.run_command(
                RunCommandOptions(command=["cat"], stdin=stdin, timeout="5")
            )
        finally:
            os.dup2(saved_fd, 0)
            os.close(saved_fd)
            os.close(read_fd)
        assert output.get_stdout_as_bytes() == b""
        assert output.get_return_code() == 0

    def test_stdin_volumineux(self):
        """Test qu'une entrée plus grande que le tampon du pipe passe."""
        data = b"x" * (1024 * 1024) + b"\n"
        output = self.executor.run_command(
            RunCommandOptions(command=["cat"], stdin=data)
        )
        assert output.get_stdout_as_bytes() == data

    def test_timeout(self):
        """Test qu'un timeout dépassé donne le code retour 124."""
        output = self.executor.run_command(
            RunCommandOptions(
                command=["sleep", "10"],
                timeout="0.5 seconds",
                allow_all_exit_codes=True,
            )
        )
        assert output.get_return_code() == TIMEOUT_EXIT_CODE
        assert output.is_timed_out() is True

    def test_timeout_non_autorise(self):
        """Test qu'un timeout sans allow_all_exit_codes lève."""
        with pytest.raises(CommandFailedError) as exc_info:
            self.executor.run_command(
                RunCommandOptions(command=["sleep", "10"], timeout="1")
            )
        assert exc_info.value.output.is_timed_out() is True

    def test_variables_environnement(self):
        """Test de additional_env_vars."""
        output = self.executor.run_command(
            RunCommandOptions(
                command=["bash", "-c", "echo $EXEC_UTILS_TEST"],
                additional_env_vars={"EXEC_UTILS_TEST": "valeur"},
            )
        )
        assert output.get_stdout_as_string() == "valeur\n"

    def test_environnement_par_defaut(self):
        """Test de default_env fusionné avec l'environnement."""
        executor = ExecCommandExecutor(
            default_env={"EXEC_UTILS_DEFAULT": "defaut"}
        )
        output = executor.run_command(
            RunCommandOptions(
                command=["bash", "-c", "echo $EXEC_UTILS_DEFAULT"],
            )
        )
        assert output.get_stdout_as_string() == "defaut\n"

    def test_programme_introuvable(self):
        """Test qu'un programme absent lève CommandLaunchError."""
        with pytest.raises(CommandLaunchError):
            self.executor.run_command(
                RunCommandOptions(command=["exec-utils-introuvable-xyz"])
            )

    def test_lancement_et_echec_distincts(self):
        """Test qu'allow_all_exit_codes ne masque pas l'échec de lancement."""
        with pytest.raises(CommandLaunchError):
            self.executor.run_command(
                RunCommandOptions(
                    command=["exec-utils-introuvable-xyz"],
                    allow_all_exit_codes=True,
                )
            )

    def test_options_non_modifiees(self):
        """Test que les options de l'appelant ne sont pas modifiées."""
        options = RunCommandOptions(command=["echo", "a"], timeout="5")
        self.executor.run_command(options)
        assert options.command == ["echo", "a"]

    def test_stdout_en_lignes(self):
        """Test de run_command_and_get_stdout_as_lines."""
        lines = self.executor.run_command_and_get_stdout_as_lines(
            RunCommandOptions(command=["bash", "-c", "echo a; echo b"])
        )
        assert lines == ["a", "b"]

    def test_stdout_en_lignes_conserve_ligne_vide(self):
        """Test de remove_last_line_if_empty=False."""
        lines = self.executor.run_command_and_get_stdout_as_lines(
            RunCommandOptions(
                command=["echo", "a"], remove_last_line_if_empty=False
            )
        )
        assert lines == ["a", ""]

    def test_stdout_en_nombres(self):
        """Test des conversions numériques de stdout."""
        assert self.executor.run_command_and_get_stdout_as_int64(
            RunCommandOptions(command=["echo", "42"])
        ) == 42
        assert self.executor.run_command_and_get_stdout_as_float64(
            RunCommandOptions(command=["echo", " 1.5 "])
        ) == 1.5

    def test_sortie_en_direct(self, capsys):
        """Test de la recopie de stdout sur la console."""
        self.executor.run_command(
            RunCommandOptions(
                command=["bash", "-c", "echo un; echo deux"],
                live_output_on_stdout=True,
            )
        )
        assert capsys.readouterr().out == "un\ndeux\n"


# --- Tests unitaires ---


class TestExecCommandExecutorUnit:
    """Tests avec subprocess.Popen simulé."""

    def setup_method(self):
        """Initialise les mocks pour chaque test."""
        self.mock_logger = MagicMock(spec=Logger)
        self.executor = ExecCommandExecutor(logger=self.mock_logger)

    def test_options_none(self):
        """Test que des options absentes sont refusées."""
        with pytest.raises(InvalidCommandRequestError):
            self.executor.run_command(None)

    def test_commande_vide(self):
        """Test qu'une commande vide est refusée avant tout lancement."""
        with patch(
            "exec_python_utils.commands.runner.subprocess.Popen"
        ) as mock_popen:
            with pytest.raises(InvalidCommandRequestError):
                self.executor.run_command(RunCommandOptions(command=[]))
            mock_popen.assert_not_called()

    def test_host_description(self):
        """Test de la description d'hôte locale."""
        assert self.executor.get_host_description() == "localhost"
        assert self.executor.is_running_on_localhost() is True

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_log_commande(self, mock_popen):
        """Test que le lancement est journalisé."""
        mock_popen.return_value = _make_mock_proc(stdout=b"ok\n")
        self.executor.run_command(RunCommandOptions(command=["ls", "-la"]))

        self.mock_logger.log_info.assert_called_once_with(
            "[user] Exécution sur localhost : ls -la"
        )

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_oserror_devient_launch_error(self, mock_popen):
        """Test de la conversion d'une OSError au lancement."""
        mock_popen.side_effect = PermissionError("permission refusée")
        with pytest.raises(CommandLaunchError):
            self.executor.run_command(RunCommandOptions(command=["x"]))
        self.mock_logger.log_error.assert_called_once()

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_code_retour_absent(self, mock_popen):
        """Test qu'un processus sans code retour lève CommandLaunchError."""
        mock_popen.return_value = _make_mock_proc(returncode=None)
        with pytest.raises(CommandLaunchError):
            self.executor.run_command(RunCommandOptions(command=["x"]))

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_stdin_non_pipe_sans_donnees(self, mock_popen):
        """Test que stdin pointe sur le périphérique nul sans données."""
        mock_popen.return_value = _make_mock_proc()
        self.executor.run_command(RunCommandOptions(command=["x"]))
        assert mock_popen.call_args[1]["stdin"] == subprocess.DEVNULL
        assert mock_popen.call_args[1]["env"] is None

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_stdin_vide_non_pipe(self, mock_popen):
        """Test qu'un stdin vide n'hérite pas non plus de l'appelant."""
        mock_popen.return_value = _make_mock_proc()
        self.executor.run_command(RunCommandOptions(command=["x"], stdin=b""))
        assert mock_popen.call_args[1]["stdin"] == subprocess.DEVNULL

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_binaire_timeout_des_options(self, mock_popen):
        """Test que le binaire timeout des options prime sur les réglages."""
        mock_popen.return_value = _make_mock_proc()
        executor = ExecCommandExecutor(
            settings=ExecutorSettings(timeout_binary="gtimeout")
        )
        executor.run_command(
            RunCommandOptions(
                command=["ls"], timeout="3", timeout_binary="/opt/timeout"
            )
        )
        assert mock_popen.call_args[0][0] == ["/opt/timeout", "3", "ls"]

    @patch("builtins.print")
    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_lignes_en_direct_journalisees(self, mock_popen, mock_print):
        """Test que les lignes affichées en direct vont au journal DEBUG."""
        mock_popen.return_value = _make_mock_proc(stdout=b"un\ndeux\n")
        self.executor.run_command(
            RunCommandOptions(command=["x"], live_output_on_stdout=True)
        )
        assert [
            c.args[0] for c in self.mock_logger.log_debug.call_args_list
        ] == ["un", "deux"]

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_sans_direct_pas_de_debug(self, mock_popen):
        """Test que la sortie capturée seule n'est pas journalisée."""
        mock_popen.return_value = _make_mock_proc(stdout=b"un\n")
        self.executor.run_command(RunCommandOptions(command=["x"]))
        self.mock_logger.log_debug.assert_not_called()

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_argv_avec_timeout(self, mock_popen):
        """Test du préfixe timeout dans l'argv lancé."""
        mock_popen.return_value = _make_mock_proc()
        self.executor.run_command(
            RunCommandOptions(command=["sleep", "9"], timeout="2 minutes")
        )
        assert mock_popen.call_args[0][0] == [
            "timeout", "120", "sleep", "9"
        ]

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_binaires_configurables(self, mock_popen):
        """Test des binaires timeout et sudo issus des réglages."""
        mock_popen.return_value = _make_mock_proc()
        executor = ExecCommandExecutor(
            settings=ExecutorSettings(
                timeout_binary="gtimeout", sudo_binary="doas"
            )
        )
        executor._is_root = False
        with patch(
            "exec_python_utils.commands.runner.is_running_on_windows",
            return_value=False,
        ):
            executor.run_command(
                RunCommandOptions(
                    command=["ls"], timeout="1", run_as_root=True
                )
            )
        assert mock_popen.call_args[0][0] == ["doas", "gtimeout", "1", "ls"]

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_run_as_root_deja_root(self, mock_popen):
        """Test qu'aucun sudo n'est ajouté pour root."""
        mock_popen.return_value = _make_mock_proc()
        self.executor._is_root = True
        self.executor.run_command(
            RunCommandOptions(command=["id"], run_as_root=True)
        )
        assert mock_popen.call_args[0][0] == ["id"]
        self.mock_logger.log_info.assert_called_once_with(
            "[ROOT] Exécution sur localhost : id"
        )

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_code_non_nul_autorise_verbose(self, mock_popen):
        """Test du log d'un code non nul accepté en mode verbeux."""
        mock_popen.return_value = _make_mock_proc(returncode=4)
        output = self.executor.run_command(
            RunCommandOptions(
                command=["x"], allow_all_exit_codes=True, verbose=True
            )
        )
        assert output.get_return_code() == 4
        assert self.mock_logger.log_info.call_count == 2

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_echec_verbose_journalise(self, mock_popen):
        """Test du log d'un échec en mode verbeux."""
        mock_popen.return_value = _make_mock_proc(
            stderr=b"erreur", returncode=1
        )
        with pytest.raises(CommandFailedError) as exc_info:
            self.executor.run_command(
                RunCommandOptions(command=["x"], verbose=True)
            )
        self.mock_logger.log_error.assert_called_once_with(
            "[user] Code retour 1 : x"
        )
        assert exc_info.value.output.get_stderr_as_string() == "erreur"

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_formatter_console(self, mock_popen, capsys):
        """Test de l'affichage console avec un formateur."""
        mock_popen.return_value = _make_mock_proc(stdout=b"ligne\n")
        executor = ExecCommandExecutor(
            console_formatter=AnsiCommandFormatter()
        )
        executor.run_command(
            RunCommandOptions(
                command=["x"], verbose=True, live_output_on_stdout=True
            )
        )
        out = capsys.readouterr().out
        assert "Exécution sur localhost : x" in out
        assert "ligne\n" in out

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_must_run_command_termine(self, mock_popen):
        """Test que must_run_command arrête le programme."""
        mock_popen.return_value = _make_mock_proc(returncode=1)
        handler = MagicMock()
        executor = ExecCommandExecutor(
            error_handlers=ErrorHandlerChain([handler])
        )
        with pytest.raises(SystemExit):
            executor.must_run_command(RunCommandOptions(command=["x"]))
        error = handler.handle.call_args[0][0]
        assert isinstance(error, CommandFailedError)

    @patch("exec_python_utils.commands.runner.subprocess.Popen")
    def test_must_run_command_reussi(self, mock_popen):
        """Test que must_run_command retourne le résultat."""
        mock_popen.return_value = _make_mock_proc(stdout=b"ok\n")
        output = self.executor.must_run_command(
            RunCommandOptions(command=["x"])
        )
        assert output.get_stdout_as_string() == "ok\n"

    def test_get_deep_copy(self):
        """Test que la copie est un exécuteur distinct."""
        copy = self.executor.get_deep_copy()
        assert copy is not self.executor
        assert copy.logger is self.mock_logger
