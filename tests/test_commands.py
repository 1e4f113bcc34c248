from equation_editor import Equation, EditCommands, CommandResult, Box


def make(text="a+b"):
  equation = Equation(text)
  return equation, EditCommands(equation)


def test_mutating_command_pushes_undo():
  equation, commands = make()
  result = commands.execute('insert_term', 'c')
  assert result.ok
  assert equation.to_string() == "a+b+c"
  assert len(equation.undo_list) == 2
  assert commands.execute('undo').value is True
  assert equation.to_string() == "a+b"
  assert commands.execute('redo').value is True
  assert equation.to_string() == "a+b+c"


def test_syntax_error_is_rejected_with_position():
  equation, commands = make()
  result = commands.execute('insert_factor', '1+*2')
  assert isinstance(result, CommandResult)
  assert not result.ok
  assert result.position == 2
  assert equation.to_string() == "a+b"
  assert len(equation.undo_list) == 1


def test_structural_error_is_rejected():
  equation, commands = make()
  result = commands.execute('delete_selection')
  assert not result.ok
  assert result.message == "Nothing is selected"


def test_nothing_to_undo_is_not_a_failure():
  _, commands = make()
  result = commands.execute('undo')
  assert result.ok
  assert result.value is False
  assert result.message == "Nothing to undo"


def test_unknown_command():
  _, commands = make()
  result = commands.execute('explode')
  assert not result.ok


def test_selection_commands_do_not_push():
  equation, commands = make("a+b+c")
  assert commands.execute('select', equation.root.terms[0]).ok
  assert commands.execute('extend_selection', 1).ok
  assert len(equation.undo_list) == 1
  assert commands.execute('wrap').ok
  assert equation.to_string() == "(a+b)+c"
  assert len(equation.undo_list) == 2


def test_simplify_then_undo():
  equation, commands = make("x^2+x^2")
  commands.execute('simplify')
  assert equation.to_string() == "2*x^2"
  commands.execute('undo')
  assert equation.to_string() == "x^2+x^2"


def test_save_and_load():
  equation, commands = make("a/b")
  saved = commands.execute('save').value
  commands.execute('set_expression', 'z')
  assert commands.execute('load', saved).ok
  assert equation.to_string() == "a/b"
  assert not equation.undo_list.can_undo


def test_bad_load_is_rejected():
  equation, commands = make("a")
  result = commands.execute('load', '<document>')
  assert not result.ok
  assert result.position is not None
  assert equation.to_string() == "a"


def test_hit_selection_commands(gc):
  equation, commands = make("1+2x")
  equation.calculate_layout(gc)
  result = commands.execute('select_box', Box(2, 1, 2, 0))
  assert result.ok
  assert result.value is equation.root.terms[1]
  assert commands.execute('select_at', 3, 0).value.name == 'x'
  assert len(equation.undo_list) == 1
