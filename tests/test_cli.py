import yaml
from click.testing import CliRunner

from budget_ledger.cli import main as cli


def invoke(data_dir, args, input=None):
    runner = CliRunner()
    return runner.invoke(cli, ['--data-dir', str(data_dir)] + args, input=input)


def register(data_dir, username='alice', password='pw'):
    res = invoke(data_dir, ['register', username], input=f'{password}\n{password}\n')
    assert res.exit_code == 0, res.output
    return res


def test_register_and_duplicate(tmp_path):
    res = register(tmp_path)
    assert 'Registered alice.' in res.output
    assert (tmp_path / 'users.csv').exists()

    res = invoke(tmp_path, ['register', 'alice'], input='x\nx\n')
    assert res.exit_code != 0
    assert 'taken' in res.output


def test_add_list_and_summary(tmp_path):
    register(tmp_path)
    res = invoke(tmp_path, ['add', 'alice', '--password', 'pw', '--type', 'income',
                            '--amount', '1000', '--date', '2/5/2024'])
    assert res.exit_code == 0, res.output
    assert 'Added Income #1: Salary Rs. 1000.00 on 02/05/2024' in res.output

    for amount, day in (('300', '10'), ('200', '15')):
        res = invoke(tmp_path, ['add', 'alice', '--password', 'pw', '--type', 'expense',
                                '--category', 'Grocery', '--amount', amount,
                                '--date', f'{day}/5/2024'])
        assert res.exit_code == 0, res.output

    res = invoke(tmp_path, ['list', 'alice', '--password', 'pw'])
    assert res.exit_code == 0, res.output
    assert 'Total Expense: Rs. 500.00' in res.output

    res = invoke(tmp_path, ['summary', 'alice', '--password', 'pw', '--month', '5',
                            '--year', '2024'])
    assert res.exit_code == 0, res.output
    assert 'Savings      : Rs. 500.00' in res.output
    assert 'Healthy (50.0% of income)' in res.output
    assert '1) Grocery - Rs. 500.00' in res.output

    res = invoke(tmp_path, ['summary', 'alice', '--password', 'pw', '--year', '2024'])
    assert 'Data present for 1 month(s)' in res.output


def test_wrong_password(tmp_path):
    register(tmp_path)
    res = invoke(tmp_path, ['list', 'alice', '--password', 'nope'])
    assert res.exit_code != 0
    assert 'Login failed' in res.output


def test_business_rule_errors_are_reported(tmp_path):
    register(tmp_path)
    res = invoke(tmp_path, ['add', 'alice', '--password', 'pw', '--type', 'expense',
                            '--amount', '5', '--date', '1/5/2024'])
    assert res.exit_code != 0
    assert 'No income recorded for 05/2024' in res.output

    args = ['add', 'alice', '--password', 'pw', '--type', 'income',
            '--amount', '5', '--date', '1/5/2024']
    assert invoke(tmp_path, args).exit_code == 0
    res = invoke(tmp_path, args)
    assert 'Salary already recorded' in res.output

    res = invoke(tmp_path, ['add', 'alice', '--password', 'pw', '--type', 'income',
                            '--category', 'Bonus', '--amount', '5', '--date', '2024-05-01'])
    assert 'Invalid date' in res.output


def test_overspend_prompt(tmp_path):
    register(tmp_path)
    base = ['add', 'alice', '--password', 'pw']
    invoke(tmp_path, base + ['--type', 'income', '--amount', '100', '--date', '1/5/2024'])
    expense = base + ['--type', 'expense', '--amount', '150', '--date', '2/5/2024']

    res = invoke(tmp_path, expense, input='n\n')
    assert 'Cancelled.' in res.output
    res = invoke(tmp_path, expense + ['--yes'])
    assert 'expenses for this month now exceed income' in res.output
    assert len((tmp_path / 'user_alice.csv').read_text().splitlines()) == 2


def test_budget_and_export(tmp_path):
    register(tmp_path)
    res = invoke(tmp_path, ['budget', 'alice', '250', '--password', 'pw'])
    assert res.exit_code == 0, res.output
    assert 'Budget saved: Rs. 250.00' in res.output

    res = invoke(tmp_path, ['budget', 'alice', 'abc', '--password', 'pw'])
    assert res.exit_code != 0

    invoke(tmp_path, ['add', 'alice', '--password', 'pw', '--type', 'income',
                      '--amount', '100', '--date', '1/5/2024'])
    res = invoke(tmp_path, ['export', 'alice', '--password', 'pw', '--year', '2024',
                            '--month', '5'])
    assert res.exit_code == 0, res.output
    assert (tmp_path / 'report_alice_2024_05.txt').exists()

    res = invoke(tmp_path, ['export', 'alice', '--password', 'pw', '--month', '5'])
    assert res.exit_code != 0


def test_passwd(tmp_path):
    register(tmp_path)
    res = invoke(tmp_path, ['passwd', 'alice'], input='pw\nnew\nnew\n')
    assert res.exit_code == 0, res.output
    assert invoke(tmp_path, ['list', 'alice', '--password', 'new']).exit_code == 0


def test_config_file_sets_currency_and_lenient_mode(tmp_path):
    data_dir = tmp_path / 'data'
    config_path = tmp_path / 'config.yaml'
    config_path.write_text(yaml.safe_dump({
        'data_dir': str(data_dir),
        'currency': '$',
        'strict': False,
    }))
    runner = CliRunner()
    res = runner.invoke(cli, ['--config', str(config_path), 'register', 'bob'],
                        input='pw\npw\n')
    assert res.exit_code == 0, res.output
    res = runner.invoke(cli, ['--config', str(config_path), 'add', 'bob', '--password', 'pw',
                              '--type', 'expense', '--amount', '12', '--date', '1/1/2024'])
    assert res.exit_code == 0, res.output
    assert 'Others $ 12.00' in res.output
    assert (data_dir / 'user_bob.csv').read_text() == '1,Expense,Others,12.00,01/01/2024,\n'


def test_interactive_menu_flow(tmp_path):
    steps = [
        '2', 'alice', 'pw',             # register
        '1', 'alice', 'pw',             # login
        '1', '1', '', '1000', '2/5/2024', 'pay',       # add income (Salary)
        '1', '2', '1', '300', '10/5/2024', '',         # add expense (Grocery)
        '1', '2', '0', 'Pets', '50', '11/5/2024', '',  # add custom category
        '4', '1', '5', '2024',          # monthly summary
        '5', '2', '3', '350',           # edit amount of #2
        '6', '3',                       # delete #3
        '7', '500',                     # budget
        '8', 'txt',                     # export
        '0',                            # save and exit
    ]
    res = invoke(tmp_path, ['menu'], input='\n'.join(steps) + '\n')
    assert res.exit_code == 0, res.output
    assert 'Registered. Login now.' in res.output
    assert 'Income added (ID 1).' in res.output
    assert 'Expense added (ID 3).' in res.output
    assert '1) Grocery - Rs. 300.00' in res.output
    assert 'Exiting. Goodbye!' in res.output

    lines = (tmp_path / 'user_alice.csv').read_text().splitlines()
    assert lines == [
        '1,Income,Salary,1000.00,02/05/2024,pay',
        '2,Expense,Grocery,350.00,10/05/2024,',
    ]
    assert (tmp_path / 'user_alice_settings.txt').read_text() == 'budget_limit:500.00\n'
    assert 'Total Expense: Rs. 350.00' in (tmp_path / 'report_alice.txt').read_text()


def test_menu_login_failure_then_exit(tmp_path):
    res = invoke(tmp_path, ['menu'], input='1\nghost\npw\n3\n')
    assert res.exit_code == 0, res.output
    assert 'Login failed.' in res.output
    assert 'Goodbye.' in res.output


def test_menu_edit_date(tmp_path):
    steps = [
        '2', 'alice', 'pw',
        '1', 'alice', 'pw',
        '1', '1', '', '1000', '2/5/2024', 'pay',
        '5', '1', '4', '2/5/2024',      # same date again
        '5', '1', '4', '2024-05-02',    # wrong shape
        '0',
    ]
    res = invoke(tmp_path, ['menu'], input='\n'.join(steps) + '\n')
    assert res.exit_code == 0, res.output
    assert res.output.count('Updated.') == 1
    assert "Invalid date '2024-05-02', expected D/M/Y; nothing changed." in res.output
    assert (tmp_path / 'user_alice.csv').read_text() == '1,Income,Salary,1000.00,02/05/2024,pay\n'
