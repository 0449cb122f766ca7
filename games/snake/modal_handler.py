"""DOM selectors and JavaScript snippets for the Snake game.

Single source of truth for the element ids the QA layer relies on and
for the JS injected via Selenium ``execute_script()`` to read the
visible game state and dispatch keyboard input.

Snake is treated as a black box: every snippet reads only what a
player sees on the page (score text, button labels and enablement,
the game-over dialog, the canvas) and never touches ``window.game``.
"""

# ---------------------------------------------------------------------------
# Selectors and labels
# ---------------------------------------------------------------------------

CANVAS_ID = "gameCanvas"
START_BUTTON_ID = "startBtn"
PAUSE_BUTTON_ID = "pauseBtn"
RESET_BUTTON_ID = "resetBtn"
PLAY_AGAIN_BUTTON_ID = "playAgainBtn"
SCORE_ID = "score"
HIGH_SCORE_ID = "highScore"
FINAL_SCORE_ID = "finalScore"
GAME_OVER_ID = "gameOver"

GAME_OVER_SHOW_CLASS = "show"

START_LABEL = "Start Game"
PAUSE_LABEL = "Pause"
RESUME_LABEL = "Resume"
RESET_LABEL = "Reset"

PAGE_HEADING = "Snake Game"
CANVAS_WIDTH = 400
CANVAS_HEIGHT = 400

# ---------------------------------------------------------------------------
# State -- everything the observation port needs in one round-trip
# ---------------------------------------------------------------------------

READ_GAME_STATE_JS = """
return (function() {
    function text(id) {
        var el = document.getElementById(id);
        return el ? (el.textContent || "") : null;
    }
    var startBtn = document.getElementById('startBtn');
    var pauseBtn = document.getElementById('pauseBtn');
    var gameOver = document.getElementById('gameOver');
    var canvas = document.getElementById('gameCanvas');

    var canvasValid = false, width = 0, height = 0;
    if (canvas && typeof canvas.getContext === 'function') {
        var ctx = canvas.getContext('2d');
        width = canvas.width || 0;
        height = canvas.height || 0;
        canvasValid = !!ctx && width > 0 && height > 0;
    }

    return {
        canvasFound: !!canvas,
        canvasValid: canvasValid,
        width: width,
        height: height,
        score: text('score'),
        highScore: text('highScore'),
        running: !!(startBtn && startBtn.disabled),
        pauseLabel: pauseBtn ? (pauseBtn.textContent || "").trim() : null,
        gameOver: !!(gameOver && gameOver.classList.contains('show'))
    };
})();
"""

READ_FINAL_SCORE_JS = """
return (function() {
    var el = document.getElementById('finalScore');
    return el ? (el.textContent || "") : null;
})();
"""

# ---------------------------------------------------------------------------
# Input -- dispatch a keydown/keyup pair on document (avoids the
# ActionChains round-trip per key)
# ---------------------------------------------------------------------------

DISPATCH_KEY_JS = """
var _sel_args = arguments;
return (function(key, code) {
    var init = {key: key, code: code, bubbles: true, cancelable: true};
    document.dispatchEvent(new KeyboardEvent('keydown', init));
    document.dispatchEvent(new KeyboardEvent('keyup', init));
    return {ok: true, key: key};
})(_sel_args[0], _sel_args[1]);
"""
