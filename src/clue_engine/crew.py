"""
Clue Game Crew - LLM agents playing seats of a match
Each player is a CrewAI agent; every turn runs as a one-task crew.
"""

from crewai import Agent, Crew, Process, Task

from clue_engine.player import Player


def create_player_agent(player: Player, tools: list, llm_model: str) -> Agent:
    """Create the agent that plays ``player``'s seat."""
    return Agent(
        role=f"{player.character} (player {player.id})",
        goal="Work out who killed the victim, with which weapon and in which room, "
             "and make a correct accusation before anyone else.",
        backstory=f"You are {player.name}, playing {player.character} in a game of Clue. "
                  "You reason carefully and never accuse without being sure.",
        tools=tools,
        llm=llm_model,
        verbose=False,
    )


def create_player_turn_crew(player: Player, player_agent: Agent) -> Crew:
    """
    Create a mini-crew for a single player's turn.

    Args:
        player: The player taking the turn
        player_agent: The agent for this player

    Returns:
        A crew configured for this player's turn
    """
    turn_task = Task(
        description=f"""
        It's your turn in the Clue game! You are player {player.id}, {player.character}.

        Your objective is to solve the mystery by figuring out:
        - WHO committed the murder (which suspect)
        - WHAT weapon was used
        - WHERE it happened (which room)

        YOUR TURN STEPS:
        1. "Get My Cards" and "Get Game Status" to see where you stand
        2. If you are certain of the solution, "Make Accusation" and stop
        3. Otherwise "Roll Dice" and "Move Pawn" to one of the listed squares,
           preferably a room
        4. If you entered a room, "Make Suspicion" about it
        5. Finish with "End Turn"

        IMPORTANT: Always pass your player id {player.id} to ALL tools.

        ⚠️ ACCUSATION WARNING: Wrong accusation = STRANDED for the rest of the game!
        """,
        expected_output="""
        A brief summary in this exact format:
        MOVE: [square or room reached / no move]
        SUSPICION: [Suspect, Weapon, Room] or "None"
        RESULT: [Card shown by player / No one could disprove / None]
        """,
        agent=player_agent,
    )

    return Crew(
        agents=[player_agent],
        tasks=[turn_task],
        process=Process.sequential,
        verbose=False,
    )
