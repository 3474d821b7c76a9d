import typing as tp

from textual import on
from textual.app import App, ComposeResult, ScreenStackError
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, Footer, Header, OptionList, Static

from .shared import DisplayTime, LapRecord, titled
from .persistent import StateStore
from .store_file import FileStore
from .controller import StopwatchController

class UI(App):
    CSS_PATH = "styles.tcss"
    BINDINGS = [
        Binding("s", "toggle_play", "Start/Pause"),
        Binding("l", "add_lap", "Lap"),
        Binding("d", "remove_lap", "Delete lap"),
        Binding("r", "reset", "Reset"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        store: StateStore,
        poll_interval: float = 0.25,
    ) -> None:
        '''
        If `store` sits on a `FileStore`, it is polled every
        `poll_interval` seconds for writes by other processes.
        '''
        super().__init__()

        self.store = store
        self.poll_interval = poll_interval
        self.controller = StopwatchController(store, onDisplay=self.showTime)
        self.shown_laps: list[LapRecord] | None = None

        self.title = "Stopwatch"

    def compose(self) -> ComposeResult:
        yield Header(show_clock=False)
        yield titled(Static("00:00.00", id="time-display"), 'Elapsed', skip_bottom=False)
        with Horizontal(id="controls"):
            yield Button("Start", id="toggle-btn", variant="success")
            yield Button("Lap", id="lap-btn")
            yield Button("Reset", id="reset-btn", variant="error")
        yield titled(OptionList(id="laps"), 'Laps', skip_bottom=False)
        yield Footer(compact=True)

    def on_mount(self) -> None:
        self.controller.initialize()
        if isinstance(self.store.kv, FileStore):
            self.set_interval(self.poll_interval, self.store.kv.poll)
        self.myUpdate()

    def showTime(self, display: DisplayTime) -> None:
        try:
            self.screen
        except ScreenStackError:
            return
        self.query_one('#time-display', Static).update(display.render())
        self.myUpdate()

    def myUpdate(self) -> None:
        bToggle = self.query_one('#toggle-btn', Button)
        bToggle.label = 'Pause' if self.controller.state.running else 'Start'
        laps = self.controller.state.laps
        if laps == self.shown_laps:
            return
        self.shown_laps = laps
        lapList = self.query_one('#laps', OptionList)
        highlighted = lapList.highlighted
        lapList.clear_options()
        lapList.add_options([
            f'#{len(laps) - i:<3} {lap.render()}'
            for i, lap in enumerate(laps)
        ])
        if highlighted is not None and laps:
            lapList.highlighted = min(highlighted, len(laps) - 1)

    @on(Button.Pressed, '#toggle-btn')
    def action_toggle_play(self) -> None:
        self.controller.togglePlay()
        self.myUpdate()

    @on(Button.Pressed, '#lap-btn')
    def action_add_lap(self) -> None:
        self.controller.addLap()
        self.myUpdate()

    @on(Button.Pressed, '#reset-btn')
    def action_reset(self) -> None:
        self.controller.reset()
        self.myUpdate()

    def action_remove_lap(self) -> None:
        index = self.query_one('#laps', OptionList).highlighted
        if index is None:
            return
        self.controller.removeLap(index)
        self.myUpdate()

    def exit(
        self, result: tp.Any = None, return_code: int = 0,
        message: tp.Any = None,
    ) -> None:
        self.controller.teardown()
        return super().exit(result, return_code, message)
