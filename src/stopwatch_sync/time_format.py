from .shared import DisplayTime, TICKS_PER_MINUTE, TICKS_PER_SECOND

def pad2(n: int) -> str:
    # pads, never truncates: minute 123 stays "123"
    return str(n).rjust(2, '0')

def formatTime(elapsed_ticks: int) -> DisplayTime:
    '''
    Split an elapsed tick count into minutes / seconds / hundredths.
    There is no hour field; minutes keep growing past 99.
    '''
    if elapsed_ticks < 0:
        raise ValueError(f'Elapsed ticks must be non-negative, got {elapsed_ticks}')
    minute_remainder = elapsed_ticks % TICKS_PER_MINUTE
    return DisplayTime(
        elapsed=elapsed_ticks,
        minutes=pad2(elapsed_ticks // TICKS_PER_MINUTE),
        seconds=pad2(minute_remainder // TICKS_PER_SECOND),
        hundredths=pad2(minute_remainder % TICKS_PER_SECOND),
    )
