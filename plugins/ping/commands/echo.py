"""/echo <text> - repeats the given text, truncated to max_echo_length."""

from blitz.plugins import Command, OptionType, SlashCommand


async def echo(client, interaction, config):
    options = {opt["name"]: opt.get("value") for opt in (interaction.data or {}).get("options", [])}
    limit = int(config.get("max_echo_length", 200))
    await interaction.response.send_message(str(options.get("text", ""))[:limit], ephemeral=True)


command = Command(
    data=SlashCommand(name="echo", description="Repeat a message").add_option(
        "text", "What to repeat", type=OptionType.STRING, required=True
    ),
    action=echo,
)
