"""/ping - replies with the configured text and the gateway latency."""

from blitz.plugins import Command, SlashCommand


async def ping(client, interaction, config):
    latency_ms = round(client.latency * 1000)
    await interaction.response.send_message(f"{config.get('reply', 'Pong!')} ({latency_ms} ms)")


command = Command(
    data=SlashCommand(name="ping", description="Check that the bot is alive"),
    action=ping,
)
